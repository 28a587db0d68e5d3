"""
AI Provider 추상 인터페이스.

- Provider 추상화로 모델/서비스 교체 가능
- 모델 ID는 호출 시 주입 (config만 SSOT)
- 텍스트 생성과 이미지 생성은 독립 호출
"""

import hashlib
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


def compute_hash(content: str) -> str:
    """SHA-256 해시 계산 (프롬프트 추적용)."""
    return f"sha256:{hashlib.sha256(content.encode()).hexdigest()[:16]}"


# =============================================================================
# Result Data Classes
# =============================================================================


@dataclass
class LLMCallParams:
    """
    LLM 호출 파라미터 기록.

    재현성에 영향을 주는 파라미터만.
    """
    temperature: float | None = None
    top_p: float | None = None
    max_tokens: int | None = None

    def to_generation_config(self) -> dict[str, Any]:
        """None 이 아닌 값만 generation_config dict로."""
        config: dict[str, Any] = {}
        if self.temperature is not None:
            config["temperature"] = self.temperature
        if self.top_p is not None:
            config["top_p"] = self.top_p
        if self.max_tokens is not None:
            config["max_output_tokens"] = self.max_tokens
        return config


@dataclass
class InlineImage:
    """응답 part에 inline으로 실린 이미지."""
    data: bytes | str
    mime_type: str | None = None


@dataclass
class MediaPart:
    """
    이미지 생성 응답의 part 하나.

    텍스트만 있는 part도 올 수 있으므로 inline_data는 선택.
    """
    inline_data: InlineImage | None = None
    text: str | None = None


@dataclass
class ImageResponse:
    """이미지 생성 응답 (0개 이상의 part)."""
    parts: list[MediaPart] = field(default_factory=list)
    model_used: str | None = None

    def first_inline_image(self) -> InlineImage | None:
        """inline 이미지 데이터가 있는 첫 part."""
        for part in self.parts:
            if part.inline_data is not None and part.inline_data.data:
                return part.inline_data
        return None


# =============================================================================
# Provider Exceptions
# =============================================================================


class ProviderError(Exception):
    """Provider 관련 에러."""

    def __init__(self, code: str, message: str, **context: Any) -> None:
        self.code = code
        self.message = message
        self.context = context
        super().__init__(f"[{code}] {message}")


# =============================================================================
# Abstract Provider
# =============================================================================


class GenerationProvider(ABC):
    """
    생성형 AI Provider 추상 인터페이스.

    역할: 프롬프트 → 텍스트 / 프롬프트 → 이미지 part
    실패는 ProviderError로 올린다 (복구는 workflow 책임).
    """

    @abstractmethod
    async def generate_text(
        self,
        model: str,
        prompt: str,
        params: LLMCallParams | None = None,
    ) -> str:
        """
        텍스트 생성.

        Args:
            model: 모델 ID
            prompt: 프롬프트
            params: 호출 파라미터 (temperature 등)

        Returns:
            생성된 텍스트 (빈 문자열 가능)

        Raises:
            ProviderError
        """
        ...

    @abstractmethod
    async def generate_image(self, model: str, prompt: str) -> ImageResponse:
        """
        이미지 생성.

        Args:
            model: 모델 ID
            prompt: 이미지 설명 프롬프트

        Returns:
            ImageResponse (part가 0개일 수 있음)

        Raises:
            ProviderError
        """
        ...
