import os
from dotenv import load_dotenv

load_dotenv()

GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY", "")
GEMINI_IMAGE_MODEL: str = os.getenv("GEMINI_IMAGE_MODEL", "gemini-2.5-flash-image")
OUTPUT_ASPECT_RATIO: str = os.getenv("OUTPUT_ASPECT_RATIO", "1:1")

STATUS_TICK_SECONDS: float = float(os.getenv("STATUS_TICK_SECONDS", "2.0"))
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

DOWNLOAD_FILENAME: str = "my-style.png"
VALID_SLOTS: list[str] = ["body", "outfit"]
