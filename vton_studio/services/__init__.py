"""External services and input normalization."""

from .gemini_client import GeminiClient, ServiceResponseError
from .image_normalizer import normalize, normalize_path, normalize_pair

__all__ = [
    "GeminiClient",
    "ServiceResponseError",
    "normalize",
    "normalize_path",
    "normalize_pair",
]
