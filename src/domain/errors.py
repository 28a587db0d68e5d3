"""
Error definitions for PromptMaster.

규칙:
- 조용한 실패 금지 → ProjectRejectError로 명시적 실패
- 검증 실패는 상태 변경/외부 호출 전에 발생
- 생성 단계 실패는 workflow 내부에서 복구 (여기 코드로 올라오지 않음)
"""

from typing import Any


class ProjectRejectError(Exception):
    """
    프로젝트 조작이 거절될 때 발생하는 에러.

    즉시 중단이 필요한 경우에만 사용:
    - name/description 누락
    - 존재하지 않는 project id 선택
    - 삭제 확인 누락
    - 생성 진행 중 재요청

    Usage:
        raise ProjectRejectError("MISSING_REQUIRED_FIELD", field="name")
    """

    def __init__(self, code: str, **context: Any) -> None:
        self.code = code
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        return f"[{self.code}] {ctx_str}" if ctx_str else f"[{self.code}]"

    def to_dict(self) -> dict[str, Any]:
        """로그/JSON 직렬화용."""
        return {
            "code": self.code,
            **self.context,
        }


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCodes:
    """에러 코드 상수."""

    # === Validation ===
    MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"

    # === Store ===
    PROJECT_NOT_FOUND = "PROJECT_NOT_FOUND"
    DUPLICATE_PROJECT_ID = "DUPLICATE_PROJECT_ID"
    STORE_BLOB_CORRUPT = "STORE_BLOB_CORRUPT"  # 로그 전용, raise 안 함

    # === View state ===
    INVALID_TRANSITION = "INVALID_TRANSITION"
    DELETE_NOT_CONFIRMED = "DELETE_NOT_CONFIRMED"

    # === Generation ===
    GENERATION_IN_PROGRESS = "GENERATION_IN_PROGRESS"
    GENERATION_FAILED = "GENERATION_FAILED"
