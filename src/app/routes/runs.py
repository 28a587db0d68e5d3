"""
Run Log Routes: 생성 실행 기록 조회.

- GET /api/runs            → run log 목록 (최신순)
- GET /api/runs/{run_id}   → run log 상세

generation.run_logs_dir 이 설정되지 않았으면 목록은 항상 비어 있다.
"""

import json
import logging
from pathlib import Path
from typing import Any

from fastapi import APIRouter, HTTPException, Request

from src.core.logging import list_run_logs, load_run_log

logger = logging.getLogger(__name__)

api_router = APIRouter()  # API endpoints


def get_run_logs_dir(request: Request) -> Path | None:
    """Request에서 run_logs_dir 가져오기."""
    workflow = request.app.state.machine.service.workflow
    if workflow is None:
        return None
    run_logs_dir: Path | None = workflow.settings.run_logs_dir
    return run_logs_dir


@api_router.get("")
async def list_runs(
    request: Request,
    limit: int = 50,
    offset: int = 0,
) -> dict[str, Any]:
    """run log 목록 (읽을 수 없는 파일은 건너뜀)."""
    logs_dir = get_run_logs_dir(request)
    if logs_dir is None:
        return {"total": 0, "runs": []}

    paths = list_run_logs(logs_dir)
    runs: list[dict[str, Any]] = []
    for path in paths[offset:offset + limit]:
        try:
            runs.append(load_run_log(path))
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
            logger.warning(f"Skipping unreadable run log {path.name}: {e}")

    return {"total": len(paths), "runs": runs}


@api_router.get("/{run_id}")
async def get_run(request: Request, run_id: str) -> dict[str, Any]:
    """run log 상세."""
    logs_dir = get_run_logs_dir(request)
    log_path = logs_dir / f"run_{run_id}.json" if logs_dir is not None else None

    if log_path is None or log_path.parent != logs_dir or not log_path.exists():
        raise HTTPException(
            status_code=404,
            detail={"code": "RUN_NOT_FOUND", "run_id": run_id},
        )

    try:
        return load_run_log(log_path)
    except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
        raise HTTPException(
            status_code=500,
            detail={"code": "RUN_LOG_UNREADABLE", "run_id": run_id, "error": str(e)},
        ) from e
