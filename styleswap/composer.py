"""Gemini image client: put a garment on a person, then refine the result."""

import asyncio
import logging
from typing import Protocol

from google import genai
from google.genai import types

from styleswap.config import GEMINI_API_KEY, GEMINI_IMAGE_MODEL, OUTPUT_ASPECT_RATIO
from styleswap.errors import GenerationFailed
from styleswap.intake import decode_data_uri, to_data_uri
from styleswap.models import UploadedImage

logger = logging.getLogger(__name__)

TRYON_INSTRUCTION = (
    "You are an elite AI fashion stylist. "
    "TASK: Perform a photorealistic virtual try-on. "
    "INPUT 1: A person's body/portrait. "
    "INPUT 2: A garment/outfit. "
    "INSTRUCTIONS: "
    "1. Seamlessly overlay the garment from input 2 onto the person in input 1. "
    "2. Preserve the person's facial features, skin tone, hair, and original background exactly. "
    "3. Adjust the garment's shape to match the person's pose and body contours. "
    "4. Match the lighting and shadows of the original scene for a natural look. "
    "5. Ensure realistic fabric draping and texture."
)

REFINE_INSTRUCTION = (
    "Refine the current image based on this request: {instruction}. "
    "Maintain the person and the outfit, focus on lighting, background, "
    "or artistic style changes."
)

TRYON_FAILED_MESSAGE = "The image could not be generated. Please try clearer photos."
EDIT_FAILED_MESSAGE = "The edit could not be applied."


class ImageComposer(Protocol):
    async def compose(self, body: UploadedImage, outfit: UploadedImage) -> str: ...

    async def refine(self, image_data_uri: str, instruction: str) -> str: ...


def _image_part(data_uri: str) -> types.Part:
    media_type, raw = decode_data_uri(data_uri)
    return types.Part.from_bytes(data=raw, mime_type=media_type)


def extract_image(response: types.GenerateContentResponse, failure_message: str) -> str:
    """Return the first inline image of the first candidate as a data URI."""
    candidates = response.candidates or []
    content = candidates[0].content if candidates else None
    parts = (content.parts if content else None) or []

    for part in parts:
        if part.inline_data and part.inline_data.data:
            media_type = part.inline_data.mime_type or "image/png"
            return to_data_uri(media_type, part.inline_data.data)

    logger.warning("Model response had no inline image (%d parts)", len(parts))
    raise GenerationFailed(failure_message)


class GeminiComposer:
    def __init__(self, client: genai.Client | None = None, model: str = GEMINI_IMAGE_MODEL):
        self._client = client
        self.model = model

    @property
    def client(self) -> genai.Client:
        # Created on first use so importing the app never needs a key
        if self._client is None:
            self._client = genai.Client(api_key=GEMINI_API_KEY)
        return self._client

    async def _generate(
        self,
        contents: list,
        config: types.GenerateContentConfig | None = None,
    ) -> types.GenerateContentResponse:
        logger.info("Calling %s with %d parts", self.model, len(contents))
        try:
            return await asyncio.to_thread(
                self.client.models.generate_content,
                model=self.model,
                contents=contents,
                config=config,
            )
        except Exception as e:
            raise RuntimeError(f"Gemini request failed: {e}") from e

    async def compose(self, body: UploadedImage, outfit: UploadedImage) -> str:
        contents = [
            _image_part(body.encoded_data),
            _image_part(outfit.encoded_data),
            TRYON_INSTRUCTION,
        ]
        config = types.GenerateContentConfig(
            image_config=types.ImageConfig(aspect_ratio=OUTPUT_ASPECT_RATIO),
        )
        response = await self._generate(contents, config)
        return extract_image(response, TRYON_FAILED_MESSAGE)

    async def refine(self, image_data_uri: str, instruction: str) -> str:
        contents = [
            _image_part(image_data_uri),
            REFINE_INSTRUCTION.format(instruction=instruction),
        ]
        response = await self._generate(contents)
        return extract_image(response, EDIT_FAILED_MESSAGE)
