"""Data models for the Virtual Try-On Studio."""

from .images import (
    DEFAULT_MIME_TYPE,
    Modality,
    UploadedImage,
    EncodedImagePart,
    GenerationRequest,
    sniff_mime_type,
)
from .session import RunStatus, TryOnSession

__all__ = [
    "DEFAULT_MIME_TYPE",
    "Modality",
    "UploadedImage",
    "EncodedImagePart",
    "GenerationRequest",
    "sniff_mime_type",
    "RunStatus",
    "TryOnSession",
]
