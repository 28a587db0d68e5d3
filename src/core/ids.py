"""
ID 생성: project_id, run_id

규칙:
- project_id: 시간 기반 (epoch ms 문자열), store 안에서만 고유하면 충분
- run_id: 매 생성 실행마다 새로 발급
"""

import time
import uuid
from collections.abc import Container
from datetime import UTC, datetime


def now_ms() -> int:
    """현재 시각 (epoch milliseconds)."""
    return int(time.time() * 1000)


def generate_project_id(existing: Container[str] = (), now: int | None = None) -> str:
    """
    Project ID 생성.

    포맷: epoch ms 문자열 (예: "1718000000000")
    같은 ms에 이미 쓰인 id가 있으면 1씩 올려서 고유성 보장.

    Args:
        existing: 이미 store에 있는 id 집합
        now: 기준 시각 (테스트 주입용)

    Returns:
        project_id 문자열
    """
    candidate = now if now is not None else now_ms()
    while str(candidate) in existing:
        candidate += 1
    return str(candidate)


def generate_run_id() -> str:
    """
    Run ID 생성.

    고유성 보장: UUID v4
    포맷: RUN-{timestamp}-{uuid[:8]}

    Returns:
        run_id 문자열
    """
    now = datetime.now(UTC)
    timestamp = now.strftime("%Y%m%d%H%M%S")
    unique = uuid.uuid4().hex[:8]

    return f"RUN-{timestamp}-{unique}"
