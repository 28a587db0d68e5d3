"""
AI Provider Abstraction.

모델 교체 가능하게 설계.
모델명은 config만 SSOT.
"""

from .base import (
    GenerationProvider,
    ImageResponse,
    InlineImage,
    LLMCallParams,
    MediaPart,
    ProviderError,
)
from .gemini import GeminiProvider

__all__ = [
    "GenerationProvider",
    "ImageResponse",
    "InlineImage",
    "LLMCallParams",
    "MediaPart",
    "ProviderError",
    "GeminiProvider",
]
