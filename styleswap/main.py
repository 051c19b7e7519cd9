import logging
from pathlib import Path

from fastapi import Depends, FastAPI, File, HTTPException, Query, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, Response

from styleswap.composer import GeminiComposer
from styleswap.config import DOWNLOAD_FILENAME, LOG_LEVEL, VALID_SLOTS
from styleswap.controller import TryOnController
from styleswap.errors import ValidationError
from styleswap.intake import decode_data_uri, read_upload
from styleswap.models import EditRequest, HealthResponse, StateResponse, UploadImageResponse

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"

app = FastAPI(title="StyleSwap")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

_controller: TryOnController | None = None


def get_controller() -> TryOnController:
    global _controller
    if _controller is None:
        _controller = TryOnController(composer=GeminiComposer())
    return _controller


@app.get("/")
async def index():
    return FileResponse(STATIC_DIR / "index.html")


@app.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(status="ok")


@app.post("/upload-image", response_model=UploadImageResponse)
async def upload_image(
    file: UploadFile = File(...),
    slot: str = Query(..., description="One of: body, outfit"),
    controller: TryOnController = Depends(get_controller),
) -> UploadImageResponse:
    if slot not in VALID_SLOTS:
        return JSONResponse(
            status_code=400,
            content={"status": "error", "error": f"Invalid slot. Must be one of {VALID_SLOTS}"},
        )

    try:
        image = await read_upload(file, slot)
    except ValidationError as e:
        return JSONResponse(status_code=400, content={"status": "error", "error": str(e)})

    controller.set_image(slot, image)
    logger.info("Stored %s image (%s)", slot, image.media_type)
    return UploadImageResponse(
        status="uploaded",
        slot=slot,
        preview_url=image.preview_reference,
        media_type=image.media_type,
    )


@app.get("/preview/{slot}/{token}")
async def preview(
    slot: str,
    token: str,
    controller: TryOnController = Depends(get_controller),
) -> Response:
    image = controller.get_image(slot)
    if image is None or image.preview_reference != f"/preview/{slot}/{token}":
        raise HTTPException(status_code=404, detail="Preview not found")
    media_type, raw = decode_data_uri(image.encoded_data)
    return Response(content=raw, media_type=media_type)


@app.post("/try-on", response_model=StateResponse)
async def try_on(controller: TryOnController = Depends(get_controller)) -> StateResponse:
    await controller.try_on()
    return controller.snapshot()


@app.post("/edit", response_model=StateResponse)
async def edit(
    request: EditRequest,
    controller: TryOnController = Depends(get_controller),
) -> StateResponse:
    if request.prompt.strip():
        await controller.edit(request.prompt)
    return controller.snapshot()


@app.post("/reset", response_model=StateResponse)
async def reset(controller: TryOnController = Depends(get_controller)) -> StateResponse:
    controller.reset()
    return controller.snapshot()


@app.get("/state", response_model=StateResponse)
async def state(controller: TryOnController = Depends(get_controller)) -> StateResponse:
    return controller.snapshot()


@app.get("/result/download")
async def download_result(controller: TryOnController = Depends(get_controller)) -> Response:
    if not controller.result_image:
        raise HTTPException(status_code=404, detail="No generated image yet")
    media_type, raw = decode_data_uri(controller.result_image)
    return Response(
        content=raw,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{DOWNLOAD_FILENAME}"'},
    )
