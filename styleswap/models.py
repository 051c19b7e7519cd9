from enum import Enum

from pydantic import BaseModel


class ProcessingStatus(str, Enum):
    IDLE = "idle"
    PROCESSING = "processing"
    SUCCESS = "success"
    ERROR = "error"


class UploadedImage(BaseModel):
    encoded_data: str
    media_type: str
    preview_reference: str


class UploadImageResponse(BaseModel):
    status: str
    slot: str
    preview_url: str
    media_type: str


class EditRequest(BaseModel):
    prompt: str = ""


class StateResponse(BaseModel):
    status: ProcessingStatus
    status_message: str | None = None
    error: str | None = None
    edit_prompt: str = ""
    result_image: str | None = None
    body_preview: str | None = None
    outfit_preview: str | None = None


class HealthResponse(BaseModel):
    status: str
