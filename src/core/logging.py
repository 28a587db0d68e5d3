"""
Generation run logging: run log schema, events, warnings

규칙:
- 경고 필수 컨텍스트: level, code, step, message
- 생성 1회 = run log 1개 (성공/실패 모두 기록)
- 문서 fallback, 아이콘 누락은 실패가 아니라 warning
"""

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from src.core.blob import atomic_write_json
from src.core.ids import generate_run_id
from src.domain.schemas import GenerationRunLog, WarningLog

# =============================================================================
# Warning Codes
# =============================================================================

DOCUMENT_FALLBACK = "DOCUMENT_FALLBACK"
DOCUMENT_EMPTY = "DOCUMENT_EMPTY"
ICON_NOT_RETURNED = "ICON_NOT_RETURNED"
ICON_FAILED = "ICON_FAILED"

# =============================================================================
# Run Log Management
# =============================================================================


def create_run_log(
    project_name: str,
    text_model: str | None = None,
    image_model: str | None = None,
) -> GenerationRunLog:
    """
    새 GenerationRunLog 생성.

    Args:
        project_name: 생성 대상 앱 이름
        text_model: 문서 생성 모델 ID
        image_model: 아이콘 생성 모델 ID

    Returns:
        초기화된 GenerationRunLog
    """
    now = datetime.now(UTC).isoformat()

    return GenerationRunLog(
        run_id=generate_run_id(),
        project_name=project_name,
        started_at=now,
        result="pending",
        text_model=text_model,
        image_model=image_model,
    )


def emit_warning(
    run_log: GenerationRunLog,
    code: str,
    step: str,
    message: str,
    detail: str | None = None,
) -> None:
    """
    경고 이벤트 기록.

    Args:
        run_log: GenerationRunLog 인스턴스
        code: 경고 코드 (DOCUMENT_FALLBACK, ICON_FAILED 등)
        step: "document" 또는 "icon"
        message: 경고 메시지
        detail: 원인 상세 (예외 문자열 등)
    """
    run_log.warnings.append(
        WarningLog(
            level="warning",
            code=code,
            step=step,
            message=message,
            detail=detail,
        )
    )


def complete_run_log(
    run_log: GenerationRunLog,
    success: bool,
    icon_status: str | None = None,
    error_code: str | None = None,
    error_context: dict[str, Any] | None = None,
) -> None:
    """
    GenerationRunLog 완료 처리.

    Args:
        run_log: GenerationRunLog 인스턴스
        success: 성공 여부
        icon_status: 아이콘 단계 결과 (IconStatus 값)
        error_code: 에러 코드 (실패 시)
        error_context: 에러 컨텍스트 (실패 시)
    """
    run_log.finished_at = datetime.now(UTC).isoformat()
    run_log.result = "success" if success else "failed"
    run_log.icon_status = icon_status

    if not success:
        run_log.error_code = error_code
        run_log.error_context = error_context


def save_run_log(run_log: GenerationRunLog, logs_dir: Path) -> Path:
    """
    GenerationRunLog를 파일로 저장.

    Args:
        run_log: GenerationRunLog 인스턴스
        logs_dir: logs/ 디렉터리 경로

    Returns:
        저장된 파일 경로
    """
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_path = logs_dir / f"run_{run_log.run_id}.json"
    atomic_write_json(log_path, run_log.to_dict())
    return log_path


def load_run_log(log_path: Path) -> dict[str, Any]:
    """저장된 run log 로드."""
    data: dict[str, Any] = json.loads(log_path.read_text(encoding="utf-8"))
    return data


def list_run_logs(logs_dir: Path) -> list[Path]:
    """
    logs/ 디렉터리의 모든 run log 파일 목록.

    Returns:
        로그 파일 경로 목록 (최신순)
    """
    if not logs_dir.exists():
        return []

    logs = list(logs_dir.glob("run_*.json"))
    logs.sort(key=lambda p: p.stat().st_mtime, reverse=True)
    return logs
