"""Image and generation request models."""

import asyncio
import base64
import binascii
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..errors import ReadError


DEFAULT_MIME_TYPE = "image/jpeg"

EXTENSION_MIME_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".webp": "image/webp",
    ".gif": "image/gif",
    ".heic": "image/heic",
}


def sniff_mime_type(data: bytes, filename: str | None = None) -> str | None:
    """Detect the image format from magic bytes, falling back to the extension."""
    if data[:3] == b'\xff\xd8\xff':
        return "image/jpeg"
    if data[:8] == b'\x89PNG\r\n\x1a\n':
        return "image/png"
    if data[:4] == b'RIFF' and data[8:12] == b'WEBP':
        return "image/webp"
    if data[:6] in (b'GIF87a', b'GIF89a'):
        return "image/gif"
    if filename:
        return EXTENSION_MIME_TYPES.get(Path(filename).suffix.lower())
    return None


class Modality(str, Enum):
    """Response modalities the generation service can return."""
    IMAGE = "IMAGE"
    TEXT = "TEXT"


class UploadedImage(BaseModel):
    """A raw image as supplied by the user."""
    model_config = ConfigDict(frozen=True)

    raw_bytes: bytes
    mime_type: str | None = None
    source_filename: str | None = None

    @classmethod
    async def from_path(cls, path: Path) -> "UploadedImage":
        """Read an image file without blocking the event loop."""
        path = Path(path)
        try:
            data = await asyncio.to_thread(path.read_bytes)
        except OSError as e:
            raise ReadError(f"Could not read image file '{path.name}': {e}") from e
        return cls(
            raw_bytes=data,
            mime_type=sniff_mime_type(data, path.name),
            source_filename=path.name,
        )

    @classmethod
    def from_data_url(cls, data: str, source_filename: str | None = None) -> "UploadedImage":
        """Decode a ``data:<mime>;base64,<payload>`` URL or bare base64 text."""
        mime_type = None
        encoded = data.strip()
        if encoded.startswith("data:"):
            header, sep, encoded = encoded.partition(",")
            if not sep or ";base64" not in header:
                raise ReadError("Image data URL is not base64-encoded.")
            mime_type = header[len("data:"):].split(";", 1)[0] or None

        try:
            raw_bytes = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ReadError(f"Image data could not be decoded: {e}") from e

        return cls(
            raw_bytes=raw_bytes,
            mime_type=mime_type or sniff_mime_type(raw_bytes, source_filename),
            source_filename=source_filename,
        )


class EncodedImagePart(BaseModel):
    """A base64-encoded image ready to embed in a generation request."""
    model_config = ConfigDict(frozen=True)

    data: str
    mime_type: str = DEFAULT_MIME_TYPE

    def decode(self) -> bytes:
        return base64.b64decode(self.data)

    def to_request_part(self) -> dict[str, Any]:
        """Wire shape of an inline image part."""
        return {"inlineData": {"mimeType": self.mime_type, "data": self.data}}


class GenerationRequest(BaseModel):
    """One request to the generation service, issued per prompt variant."""
    model_config = ConfigDict(frozen=True)

    model: str
    image_parts: tuple[EncodedImagePart, EncodedImagePart]  # (subject, garment)
    prompt: str
    response_modalities: tuple[Modality, ...] = Field(
        default=(Modality.IMAGE, Modality.TEXT),
    )

    @field_validator("prompt")
    @classmethod
    def _prompt_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("prompt must not be blank")
        return value

    def to_payload(self) -> dict[str, Any]:
        """Render the JSON body: subject, garment, then the prompt text."""
        parts = [part.to_request_part() for part in self.image_parts]
        parts.append({"text": self.prompt})
        return {
            "contents": [{"role": "user", "parts": parts}],
            "generationConfig": {
                "responseModalities": [m.value for m in self.response_modalities],
            },
        }
