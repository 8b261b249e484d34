"""FastAPI server for Virtual Try-On.

Receives a subject photo and a garment photo, either as base64 data URLs
(JSON) or as file uploads (multipart), and returns the generated images
as data URLs.
"""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, File, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from vton_studio import __version__
from vton_studio.config import PipelineConfig
from vton_studio.errors import ReadError, TryOnError, TryOnInProgressError, UnknownError
from vton_studio.logging_utils import configure_logging
from vton_studio.models import UploadedImage, sniff_mime_type
from vton_studio.pipeline import TryOnPipeline

logger = logging.getLogger("vton_studio.api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    if _pipeline is not None:
        await _pipeline.client.close()


app = FastAPI(
    title="Virtual Try-On Studio API",
    description="Generate photos of a person wearing a garment",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class TryOnRequest(BaseModel):
    """Request body for try-on generation."""
    subject_photo: str  # Base64 data URL of the person
    garment_photo: str  # Base64 data URL of the clothing item


class TryOnResponse(BaseModel):
    """Response with generated images."""
    success: bool
    images: list[str] = Field(default_factory=list)
    error: str | None = None
    error_kind: str | None = None


# Initialize pipeline (will be done on first request)
_pipeline: TryOnPipeline | None = None

# One try-on at a time
_run_lock = asyncio.Lock()


def get_pipeline() -> TryOnPipeline:
    """Get or create the pipeline instance."""
    global _pipeline
    if _pipeline is None:
        config = PipelineConfig()  # Loads from .env automatically via pydantic-settings
        configure_logging(config.log_level)
        _pipeline = TryOnPipeline(config)
    return _pipeline


def _error_response(error: TryOnError, status_code: int = 200) -> JSONResponse:
    body = TryOnResponse(success=False, error=error.message, error_kind=error.kind)
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def _run_exclusive(coro_factory) -> TryOnResponse | JSONResponse:
    """Run a try-on unless one is already outstanding."""
    if _run_lock.locked():
        return _error_response(TryOnInProgressError(), status_code=409)

    async with _run_lock:
        try:
            images = await coro_factory()
        except TryOnError as e:
            return _error_response(e)
        except Exception:
            logger.exception("Unhandled error in try-on request")
            return _error_response(UnknownError())

    return TryOnResponse(success=True, images=images)


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "Virtual Try-On Studio API", "version": __version__}


@app.get("/health")
async def health():
    """Detailed health check."""
    pipeline = get_pipeline()
    gemini_ok = await pipeline.client.check_connection()

    return {
        "status": "ok" if gemini_ok else "degraded",
        "gemini": "connected" if gemini_ok else "disconnected",
    }


@app.post("/api/tryon", response_model=TryOnResponse)
async def generate_tryon(request: TryOnRequest):
    """Generate virtual try-on images from base64 photos.

    Returns:
        Data URLs of the generated images, in prompt-variant order
    """
    async def _run():
        pipeline = get_pipeline()
        return await pipeline.run_from_base64(
            subject_photo_base64=request.subject_photo,
            garment_photo_base64=request.garment_photo,
        )

    return await _run_exclusive(_run)


@app.post("/api/tryon/upload", response_model=TryOnResponse)
async def generate_tryon_upload(
    subject: UploadFile = File(...),
    garment: UploadFile = File(...),
):
    """Generate virtual try-on images from uploaded files."""
    async def _run():
        pipeline = get_pipeline()
        subject_image = await _read_upload(subject)
        garment_image = await _read_upload(garment)
        session = await pipeline.run(subject_image, garment_image)
        return session.images

    return await _run_exclusive(_run)


async def _read_upload(upload: UploadFile) -> UploadedImage:
    try:
        data = await upload.read()
    except OSError as e:
        raise ReadError(f"Could not read uploaded file '{upload.filename}': {e}") from e
    return UploadedImage(
        raw_bytes=data,
        mime_type=_upload_mime_type(upload, data),
        source_filename=upload.filename,
    )


def _upload_mime_type(upload: UploadFile, data: bytes) -> str | None:
    """Prefer the declared image type, else sniff the bytes."""
    if upload.content_type and upload.content_type.startswith("image/"):
        return upload.content_type
    return sniff_mime_type(data, upload.filename)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
