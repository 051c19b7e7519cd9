"""
Shared pytest fixtures for the try-on tests
"""
import io

import pytest
from PIL import Image

from styleswap.controller import TryOnController
from styleswap.intake import encode_image
from styleswap.ticker import StatusTicker

RESULT_URI = "data:image/png;base64,cmVzdWx0"
REFINED_URI = "data:image/png;base64,cmVmaW5lZA=="


class FakeComposer:
    """Records calls and answers with canned data URIs or raises ``error``."""

    def __init__(self, result: str = RESULT_URI, refined: str = REFINED_URI):
        self.result = result
        self.refined = refined
        self.error: Exception | None = None
        self.compose_calls: list = []
        self.refine_calls: list = []

    async def compose(self, body, outfit):
        self.compose_calls.append((body, outfit))
        if self.error:
            raise self.error
        return self.result

    async def refine(self, image_data_uri, instruction):
        self.refine_calls.append((image_data_uri, instruction))
        if self.error:
            raise self.error
        return self.refined


def make_png(color=(200, 30, 90), size=(8, 8)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def png_bytes():
    """Provide a small real PNG"""
    return make_png()


@pytest.fixture
def body_image(png_bytes):
    return encode_image(png_bytes, "image/png", "body")


@pytest.fixture
def outfit_image():
    return encode_image(make_png((10, 10, 10)), "image/png", "outfit")


@pytest.fixture
def fake_composer():
    return FakeComposer()


@pytest.fixture
def controller(fake_composer):
    """Controller wired to the fake composer with a fast ticker"""
    return TryOnController(composer=fake_composer, ticker=StatusTicker(interval=0.01))
