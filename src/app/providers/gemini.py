"""
Google Gemini Provider.

텍스트(PRD)와 이미지(앱 아이콘)를 같은 SDK로 생성한다.

예외 정책:
- 모든 SDK 예외 → ProviderError (code로 원인 구분)
- 재시도/fallback 없음 (사용자가 다시 제출)
"""

import logging
import os
from typing import Any

from google.api_core.exceptions import (
    GoogleAPIError,
    InvalidArgument,
    NotFound,
    PermissionDenied,
    ResourceExhausted,
    ServiceUnavailable,
    Unauthenticated,
)

from .base import (
    GenerationProvider,
    ImageResponse,
    InlineImage,
    LLMCallParams,
    MediaPart,
    ProviderError,
)

logger = logging.getLogger(__name__)

# =============================================================================
# Exception Mapping
# =============================================================================

ERROR_CODES: tuple[tuple[type[Exception], str], ...] = (
    (InvalidArgument, "AUTH_OR_INPUT_ERROR"),
    (PermissionDenied, "AUTH_OR_INPUT_ERROR"),
    (Unauthenticated, "AUTH_OR_INPUT_ERROR"),
    (ResourceExhausted, "QUOTA_EXCEEDED"),
    (ServiceUnavailable, "SERVICE_UNAVAILABLE"),
    (NotFound, "MODEL_NOT_FOUND"),
)


def classify_error(error: Exception) -> str:
    """SDK 예외 → ProviderError code."""
    for exc_type, code in ERROR_CODES:
        if isinstance(error, exc_type):
            return code
    if isinstance(error, GoogleAPIError):
        return "API_ERROR"
    return "GENERATION_FAILED"


def get_user_friendly_error_message(error: Exception) -> str:
    """사용자 친화적인 에러 메시지 생성."""
    if isinstance(error, Unauthenticated):
        return (
            "Google API 인증에 실패했습니다. "
            "GOOGLE_API_KEY 환경변수를 확인해주세요."
        )
    elif isinstance(error, PermissionDenied):
        return (
            "이 작업을 수행할 권한이 없습니다. "
            "API 키의 권한을 확인해주세요."
        )
    elif isinstance(error, ResourceExhausted):
        return (
            "API 사용량 한도를 초과했습니다. "
            "잠시 후 다시 시도하거나 할당량을 확인해주세요."
        )
    elif isinstance(error, ServiceUnavailable):
        return (
            "Google API 서비스를 일시적으로 사용할 수 없습니다. "
            "잠시 후 다시 시도해주세요."
        )
    elif isinstance(error, InvalidArgument):
        return "요청 형식이 올바르지 않습니다. 프롬프트 내용을 확인해주세요."
    elif isinstance(error, NotFound):
        return "요청한 모델을 찾을 수 없습니다. 모델 설정을 확인해주세요."

    error_str = str(error)
    lowered = error_str.lower()
    if "api_key" in lowered or "api key" in lowered:
        return "API 키 설정을 확인해주세요."
    elif "quota" in lowered or "limit" in lowered:
        return "API 사용량 한도를 초과했습니다. 잠시 후 다시 시도해주세요."
    elif "connection" in lowered:
        return "네트워크 연결 오류가 발생했습니다."
    elif "timeout" in lowered:
        return "요청 시간이 초과되었습니다. 다시 시도해주세요."

    return f"생성 중 오류가 발생했습니다: {error_str}"


class GeminiProvider(GenerationProvider):
    """
    Gemini Provider.

    Usage:
        provider = GeminiProvider(api_key="...")
        text = await provider.generate_text(
            "gemini-2.5-flash", prompt, LLMCallParams(temperature=0.7)
        )
        image = await provider.generate_image("gemini-2.5-flash-image", prompt)
    """

    def __init__(self, api_key: str | None = None):
        """
        Args:
            api_key: API 키 (환경변수 GOOGLE_API_KEY, API_KEY 순으로 사용 가능)
        """
        self.api_key = (
            api_key
            or os.environ.get("GOOGLE_API_KEY")
            or os.environ.get("API_KEY")
        )
        self._client: Any = None

    def _get_client(self) -> Any:
        """Gemini 클라이언트 (lazy init)."""
        if self._client is None:
            try:
                import google.generativeai as genai
                genai.configure(api_key=self.api_key)
                self._client = genai
            except ImportError as e:
                raise ProviderError(
                    "GEMINI_NOT_INSTALLED",
                    "google-generativeai package not installed. "
                    "Run: pip install google-generativeai",
                ) from e
        return self._client

    async def generate_text(
        self,
        model: str,
        prompt: str,
        params: LLMCallParams | None = None,
    ) -> str:
        generation_config = (params or LLMCallParams()).to_generation_config()

        try:
            genai = self._get_client()
            model_instance = genai.GenerativeModel(model)
            response = await model_instance.generate_content_async(
                prompt,
                generation_config=generation_config,
            )
            return response.text or ""
        except ProviderError:
            raise
        except Exception as e:
            logger.error(f"Text generation failed ({model}): {e}")
            raise ProviderError(
                classify_error(e),
                get_user_friendly_error_message(e),
                model=model,
            ) from e

    async def generate_image(self, model: str, prompt: str) -> ImageResponse:
        try:
            genai = self._get_client()
            model_instance = genai.GenerativeModel(model)
            response = await model_instance.generate_content_async(prompt)
        except ProviderError:
            raise
        except Exception as e:
            logger.error(f"Image generation failed ({model}): {e}")
            raise ProviderError(
                classify_error(e),
                get_user_friendly_error_message(e),
                model=model,
            ) from e

        return ImageResponse(parts=self._extract_parts(response), model_used=model)

    def _extract_parts(self, response: Any) -> list[MediaPart]:
        """
        SDK 응답 → MediaPart 목록.

        첫 번째 candidate의 content.parts만 본다.
        inline_data가 비어 있는 part는 텍스트 part로 취급.
        """
        candidates = getattr(response, "candidates", None) or []
        if not candidates:
            return []

        content = getattr(candidates[0], "content", None)
        raw_parts = getattr(content, "parts", None) or []

        parts: list[MediaPart] = []
        for raw in raw_parts:
            inline = getattr(raw, "inline_data", None)
            data = getattr(inline, "data", None) if inline is not None else None
            if data:
                parts.append(
                    MediaPart(
                        inline_data=InlineImage(
                            data=data,
                            mime_type=getattr(inline, "mime_type", None) or None,
                        )
                    )
                )
            else:
                parts.append(MediaPart(text=getattr(raw, "text", None) or None))
        return parts
