"""
Generation Workflow: (name, description) → PRD 문서 + 앱 아이콘

실행 순서 (엄격히 순차):
1. 문서 생성 → 실패 시 fallback 문자열, 중단하지 않음
2. 아이콘 생성 → 실패/이미지 없음이면 icon=None, 에러 아님

두 단계 모두 예외를 내부에서 잡는다.
timeout/retry/cancellation 없음 (호출자가 필요하면 바깥에서 감싼다).
"""

import base64
import logging
from dataclasses import dataclass
from pathlib import Path

from src.app.providers.base import (
    GenerationProvider,
    InlineImage,
    LLMCallParams,
    compute_hash,
)
from src.core.logging import (
    DOCUMENT_EMPTY,
    DOCUMENT_FALLBACK,
    ICON_FAILED,
    ICON_NOT_RETURNED,
    complete_run_log,
    create_run_log,
    emit_warning,
    save_run_log,
)
from src.domain.constants import (
    DEFAULT_ICON_MIME_TYPE,
    DEFAULT_IMAGE_MODEL,
    DEFAULT_TEMPERATURE,
    DEFAULT_TEXT_MODEL,
    DOCUMENT_EMPTY_TEXT,
    DOCUMENT_FALLBACK_TEXT,
)
from src.domain.schemas import GenerateResult, GenerationRunLog, IconStatus

logger = logging.getLogger(__name__)

# =============================================================================
# Prompt Templates
# =============================================================================

DOCUMENT_PROMPT_TEMPLATE = """
시니어 Product Manager 겸 소프트웨어 아키텍트로서 행동하세요.
"{name}" 이라는 앱을 위한 매우 상세하고 구조화된 PRD(Product Requirements Document)를 작성하세요.

앱 아이디어: "{description}"

응답은 Markdown 형식이어야 하며, AI 엔지니어에게 코드를 만들게 하는 프롬프트로
그대로 복사해 붙여넣을 수 있도록 최적화해야 합니다.

다음 구조를 포함하세요:
1. **프로젝트 개요**: 요약.
2. **사용자 흐름 (User Flow)**: 사용자 여정의 단계별 설명.
3. **주요 기능**: 상세 목록 (Must Have).
4. **제안 기술 구조**:
   - Frontend (React + Tailwind 권장)
   - Backend (필요한 경우, 아니면 Mock/LocalStorage)
   - 핵심 라이브러리.
5. **UI 컴포넌트**: 필요한 컴포넌트 목록.
6. **색상 및 디자인 스키마**: 팔레트 제안.

기술적이고, 직설적이며, 영감을 주는 톤으로 작성하세요.
"""

ICON_PROMPT_TEMPLATE = """
Create a high-quality, modern mobile app icon for an app named "{name}".
Description of app logic: {description}.
Style: Minimalist, vector art, gradient background, rounded corners (iOS style), professional, high resolution (1024x1024).
Do not include text inside the logo if possible, focus on a symbolic icon.
"""


def build_document_prompt(name: str, description: str) -> str:
    """문서 생성 프롬프트 (6개 섹션 고정)."""
    return DOCUMENT_PROMPT_TEMPLATE.format(name=name, description=description)


def build_icon_prompt(name: str, description: str) -> str:
    """아이콘 생성 프롬프트 (미니멀 정사각형 아이콘)."""
    return ICON_PROMPT_TEMPLATE.format(name=name, description=description)


def to_data_uri(image: InlineImage) -> str:
    """
    inline 이미지 → data URI.

    bytes 는 base64 인코딩, str 은 이미 base64 라고 간주.
    mime_type 이 없으면 image/png.
    """
    mime_type = image.mime_type or DEFAULT_ICON_MIME_TYPE
    if isinstance(image.data, bytes):
        payload = base64.b64encode(image.data).decode("ascii")
    else:
        payload = image.data
    return f"data:{mime_type};base64,{payload}"


# =============================================================================
# Workflow
# =============================================================================


@dataclass
class GenerationSettings:
    """생성 설정 (config에서 주입)."""
    text_model: str = DEFAULT_TEXT_MODEL
    image_model: str = DEFAULT_IMAGE_MODEL
    temperature: float = DEFAULT_TEMPERATURE
    top_p: float | None = None
    max_output_tokens: int | None = None
    run_logs_dir: Path | None = None


class GenerationWorkflow:
    """
    PRD + 아이콘 생성 workflow.

    Usage:
        workflow = GenerationWorkflow(GeminiProvider())
        result = await workflow.generate("FitTracker", "Track workouts")
        result.document, result.icon
    """

    def __init__(
        self,
        provider: GenerationProvider,
        settings: GenerationSettings | None = None,
    ):
        self.provider = provider
        self.settings = settings or GenerationSettings()
        self.last_run_log: GenerationRunLog | None = None

    async def generate(self, name: str, description: str) -> GenerateResult:
        """
        문서 → 아이콘 순으로 생성.

        두 단계의 예외는 모두 내부에서 복구된다.
        여기서 빠져나가는 예외는 예상 밖 실패이며 호출자가 처리한다.

        Args:
            name: 앱 이름
            description: 앱 아이디어 설명

        Returns:
            GenerateResult
        """
        run_log = create_run_log(
            name,
            text_model=self.settings.text_model,
            image_model=self.settings.image_model,
        )
        self.last_run_log = run_log

        document, document_ok = await self._generate_document(run_log, name, description)
        icon, icon_status = await self._generate_icon(run_log, name, description)

        complete_run_log(run_log, success=True, icon_status=icon_status.value)
        self._save_run_log(run_log)

        return GenerateResult(
            document=document,
            icon=icon,
            document_ok=document_ok,
            icon_status=icon_status,
        )

    async def _generate_document(
        self,
        run_log: GenerationRunLog,
        name: str,
        description: str,
    ) -> tuple[str, bool]:
        """1단계: PRD 문서."""
        prompt = build_document_prompt(name, description)
        params = LLMCallParams(
            temperature=self.settings.temperature,
            top_p=self.settings.top_p,
            max_tokens=self.settings.max_output_tokens,
        )

        try:
            text = await self.provider.generate_text(
                self.settings.text_model, prompt, params
            )
        except Exception as e:
            logger.error(
                f"PRD generation failed for {name!r} "
                f"(prompt {compute_hash(prompt)}): {e}"
            )
            emit_warning(
                run_log,
                DOCUMENT_FALLBACK,
                step="document",
                message="문서 생성 실패, fallback 문자열로 대체",
                detail=str(e),
            )
            return DOCUMENT_FALLBACK_TEXT, False

        if not text:
            logger.warning(f"PRD generation returned empty text for {name!r}")
            emit_warning(
                run_log,
                DOCUMENT_EMPTY,
                step="document",
                message="문서 생성 결과가 비어 있음",
            )
            return DOCUMENT_EMPTY_TEXT, False

        return text, True

    async def _generate_icon(
        self,
        run_log: GenerationRunLog,
        name: str,
        description: str,
    ) -> tuple[str | None, IconStatus]:
        """2단계: 앱 아이콘."""
        prompt = build_icon_prompt(name, description)

        try:
            response = await self.provider.generate_image(self.settings.image_model, prompt)
        except Exception as e:
            logger.error(f"Icon generation failed for {name!r}: {e}")
            emit_warning(
                run_log,
                ICON_FAILED,
                step="icon",
                message="아이콘 생성 호출 실패",
                detail=str(e),
            )
            return None, IconStatus.FAILED

        image = response.first_inline_image()
        if image is None:
            logger.info(f"Icon generation returned no inline image for {name!r}")
            emit_warning(
                run_log,
                ICON_NOT_RETURNED,
                step="icon",
                message="응답에 이미지 데이터 없음",
            )
            return None, IconStatus.NOT_RETURNED

        return to_data_uri(image), IconStatus.GENERATED

    def _save_run_log(self, run_log: GenerationRunLog) -> None:
        """run log 저장 (설정된 경우만). 저장 실패는 생성 결과에 영향 없음."""
        if self.settings.run_logs_dir is None:
            return
        try:
            save_run_log(run_log, self.settings.run_logs_dir)
        except OSError as e:
            logger.warning(f"Failed to save generation run log {run_log.run_id}: {e}")
