# Test fixtures and configuration
import base64
import sys
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from vton_studio.config import GeminiConfig, PipelineConfig, PromptConfig
from vton_studio.models import EncodedImagePart


@pytest.fixture
def minimal_png_bytes():
    """Minimal valid PNG image bytes."""
    return bytes([
        0x89, 0x50, 0x4E, 0x47, 0x0D, 0x0A, 0x1A, 0x0A,  # PNG signature
        0x00, 0x00, 0x00, 0x0D, 0x49, 0x48, 0x44, 0x52,  # IHDR chunk
        0x00, 0x00, 0x00, 0x01, 0x00, 0x00, 0x00, 0x01,  # 1x1 dimensions
        0x08, 0x02, 0x00, 0x00, 0x00, 0x90, 0x77, 0x53,
        0xDE, 0x00, 0x00, 0x00, 0x0C, 0x49, 0x44, 0x41,  # IDAT chunk
        0x54, 0x08, 0xD7, 0x63, 0xF8, 0xCF, 0xC0, 0x00,
        0x00, 0x00, 0x03, 0x00, 0x01, 0x00, 0x05, 0xFE,
        0xD4, 0xAA, 0x00, 0x00, 0x00, 0x00, 0x49, 0x45,  # IEND chunk
        0x4E, 0x44, 0xAE, 0x42, 0x60, 0x82
    ])


@pytest.fixture
def subject_jpeg_bytes():
    """~2KB of JPEG-looking bytes for the subject photo."""
    return b'\xff\xd8\xff\xe0' + bytes(range(256)) * 8 + b'\xff\xd9'


@pytest.fixture
def garment_png_bytes(minimal_png_bytes):
    """~3KB of PNG-looking bytes for the garment photo."""
    return minimal_png_bytes + bytes(reversed(range(256))) * 12


@pytest.fixture
def temp_image_file(tmp_path, minimal_png_bytes):
    """Create a temporary PNG file."""
    img_path = tmp_path / "test_image.png"
    img_path.write_bytes(minimal_png_bytes)
    return img_path


@pytest.fixture
def subject_part(subject_jpeg_bytes):
    return EncodedImagePart(
        data=base64.b64encode(subject_jpeg_bytes).decode(),
        mime_type="image/jpeg",
    )


@pytest.fixture
def garment_part(garment_png_bytes):
    return EncodedImagePart(
        data=base64.b64encode(garment_png_bytes).decode(),
        mime_type="image/png",
    )


@pytest.fixture
def test_config():
    """Config that never touches the real service."""
    return PipelineConfig(
        gemini=GeminiConfig(base_url="https://gemini.test/v1beta", model="test-image-model", timeout=5.0),
        prompts=PromptConfig(
            base_prompt="Dress the person in the garment.",
            augmentations=["Front view.", "Casual pose."],
        ),
        gemini_api_key="test-key",
    )


def make_image_response(*images: tuple[str, bytes], text: str | None = None) -> dict:
    """Build a generateContent response body with the given (mime, bytes) images."""
    parts = []
    if text:
        parts.append({"text": text})
    for mime_type, data in images:
        parts.append({
            "inlineData": {
                "mimeType": mime_type,
                "data": base64.b64encode(data).decode(),
            }
        })
    return {"candidates": [{"content": {"role": "model", "parts": parts}}]}


@pytest.fixture
def image_response():
    return make_image_response
