"""Virtual Try-On Studio - composite a person with a garment using a generative image service."""

from .config import PipelineConfig, load_config
from .errors import (
    TryOnError,
    ReadError,
    MissingImageError,
    GenerationError,
    NoImageProducedError,
    UnknownError,
    TryOnInProgressError,
)
from .pipeline import TryOnPipeline

__version__ = "1.0.0"

__all__ = [
    "PipelineConfig",
    "load_config",
    "TryOnError",
    "ReadError",
    "MissingImageError",
    "GenerationError",
    "NoImageProducedError",
    "UnknownError",
    "TryOnInProgressError",
    "TryOnPipeline",
]
