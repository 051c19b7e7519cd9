"""Session state and orchestration: upload → try on → edit loop."""

import logging

from styleswap.composer import ImageComposer
from styleswap.errors import ValidationError
from styleswap.models import ProcessingStatus, StateResponse, UploadedImage
from styleswap.ticker import StatusTicker

logger = logging.getLogger(__name__)

MISSING_IMAGES_MESSAGE = "Please upload both your own photo and the outfit photo."
GENERIC_ERROR_MESSAGE = "Something went wrong. Please try again."
EDIT_ERROR_MESSAGE = "Something went wrong while editing."


class TryOnController:
    """Holds one browser session's images, result and status.

    At most one request is outstanding: ``try_on`` and ``edit`` return
    immediately while the status is ``processing``. ``reset`` is always
    honoured; the outcome of a request it interrupts is dropped.
    """

    def __init__(self, composer: ImageComposer, ticker: StatusTicker | None = None):
        self.composer = composer
        self.ticker = ticker or StatusTicker()
        self.body_image: UploadedImage | None = None
        self.outfit_image: UploadedImage | None = None
        self.result_image: str | None = None
        self.status = ProcessingStatus.IDLE
        self.error_message: str | None = None
        self.edit_prompt = ""
        self._run = 0

    @property
    def busy(self) -> bool:
        return self.status == ProcessingStatus.PROCESSING

    def set_image(self, slot: str, image: UploadedImage) -> None:
        if slot == "body":
            self.body_image = image
        elif slot == "outfit":
            self.outfit_image = image
        else:
            raise ValidationError(f"Invalid slot: {slot}")

    def get_image(self, slot: str) -> UploadedImage | None:
        return {"body": self.body_image, "outfit": self.outfit_image}.get(slot)

    def update_prompt(self, text: str) -> None:
        self.edit_prompt = text

    def _begin(self) -> int:
        self.status = ProcessingStatus.PROCESSING
        self.ticker.start()
        return self._run

    def _superseded(self, run: int) -> bool:
        if run != self._run:
            logger.info("Discarding outcome of a request that was reset")
            return True
        return False

    def _finish(self, status: ProcessingStatus, error: str | None = None) -> None:
        self.ticker.stop()
        self.status = status
        self.error_message = error

    async def try_on(self) -> None:
        if self.busy:
            return
        if self.body_image is None or self.outfit_image is None:
            self.error_message = MISSING_IMAGES_MESSAGE
            return

        self.error_message = None
        run = self._begin()
        try:
            result = await self.composer.compose(self.body_image, self.outfit_image)
        except RuntimeError as e:
            if self._superseded(run):
                return
            logger.error("Try-on failed: %s", e)
            self._finish(ProcessingStatus.ERROR, str(e) or GENERIC_ERROR_MESSAGE)
            return
        except Exception:
            if self._superseded(run):
                return
            logger.exception("Unexpected error during try-on")
            self._finish(ProcessingStatus.ERROR, GENERIC_ERROR_MESSAGE)
            return

        if self._superseded(run):
            return
        self.result_image = result
        self._finish(ProcessingStatus.SUCCESS)

    async def edit(self, prompt: str | None = None) -> None:
        if self.busy:
            return
        if prompt is not None:
            self.update_prompt(prompt)
        if not self.result_image or not self.edit_prompt.strip():
            return

        run = self._begin()
        try:
            result = await self.composer.refine(self.result_image, self.edit_prompt)
        except Exception:
            if self._superseded(run):
                return
            # Previous result stays on screen
            logger.exception("Edit failed for prompt %r", self.edit_prompt)
            self._finish(ProcessingStatus.ERROR, EDIT_ERROR_MESSAGE)
            return

        if self._superseded(run):
            return
        self.result_image = result
        self.edit_prompt = ""
        self._finish(ProcessingStatus.SUCCESS)

    def reset(self) -> None:
        # A request still in flight finishes into a discarded run
        self._run += 1
        self.ticker.stop()
        self.body_image = None
        self.outfit_image = None
        self.result_image = None
        self.status = ProcessingStatus.IDLE
        self.error_message = None
        self.edit_prompt = ""

    def snapshot(self) -> StateResponse:
        return StateResponse(
            status=self.status,
            status_message=self.ticker.message if self.busy else None,
            error=self.error_message,
            edit_prompt=self.edit_prompt,
            result_image=self.result_image,
            body_preview=self.body_image.preview_reference if self.body_image else None,
            outfit_preview=self.outfit_image.preview_reference if self.outfit_image else None,
        )
