"""Try-on orchestration."""

from .tryon_pipeline import TryOnPipeline, extract_image_uris

__all__ = ["TryOnPipeline", "extract_image_uris"]
