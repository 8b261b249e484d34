"""Turn uploaded images into base64 parts for the generation request."""

import asyncio
import base64
import logging
from pathlib import Path

from ..errors import MissingImageError, ReadError
from ..models import DEFAULT_MIME_TYPE, EncodedImagePart, UploadedImage

logger = logging.getLogger(__name__)


def normalize(image: UploadedImage) -> EncodedImagePart:
    """Encode the exact bytes of an uploaded image.

    No resizing, recompression or metadata stripping is done, so
    ``normalize(x).decode() == x.raw_bytes`` always holds.

    Raises:
        ReadError: if the image has no content
    """
    if image is None:
        raise MissingImageError("input")
    if not image.raw_bytes:
        name = f" '{image.source_filename}'" if image.source_filename else ""
        raise ReadError(f"The image{name} is empty or could not be read.")

    return EncodedImagePart(
        data=base64.b64encode(image.raw_bytes).decode("ascii"),
        mime_type=image.mime_type or DEFAULT_MIME_TYPE,
    )


async def normalize_path(path: Path) -> EncodedImagePart:
    """Read an image file and encode it."""
    image = await UploadedImage.from_path(path)
    return normalize(image)


async def normalize_pair(
    subject: UploadedImage,
    garment: UploadedImage,
) -> tuple[EncodedImagePart, EncodedImagePart]:
    """Encode the subject and garment images independently.

    Returns:
        (subject_part, garment_part)
    """
    if subject is None:
        raise MissingImageError("subject")
    if garment is None:
        raise MissingImageError("garment")

    subject_part, garment_part = await asyncio.gather(
        asyncio.to_thread(normalize, subject),
        asyncio.to_thread(normalize, garment),
    )
    logger.debug(
        "Normalized subject (%s, %d bytes) and garment (%s, %d bytes)",
        subject_part.mime_type, len(subject.raw_bytes),
        garment_part.mime_type, len(garment.raw_bytes),
    )
    return subject_part, garment_part
