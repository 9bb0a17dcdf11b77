"""HTTP clients for the completion and image generation proxies."""

from routebot.models.completion import (
    FALLBACK_ERROR,
    FALLBACK_NO_CONTENT,
    CompletionClient,
    extract_completion,
)
from routebot.models.imagegen import ImageClient, ImageGenerationError, ImageResult

__all__ = [
    "CompletionClient",
    "FALLBACK_ERROR",
    "FALLBACK_NO_CONTENT",
    "ImageClient",
    "ImageGenerationError",
    "ImageResult",
    "extract_completion",
]
