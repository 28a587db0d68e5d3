"""
Core layer: 상태 보존 핵심 모듈.

역할:
- durable blob (원자적 쓰기), 프로젝트 store, ID, 생성 run log
"""

from .blob import BlobStore, FileBlobStore, MemoryBlobStore, atomic_write_json
from .ids import generate_project_id, generate_run_id, now_ms
from .logging import complete_run_log, create_run_log, emit_warning, save_run_log
from .store import ProjectStore

__all__ = [
    # blob
    "BlobStore",
    "FileBlobStore",
    "MemoryBlobStore",
    "atomic_write_json",
    # ids
    "generate_project_id",
    "generate_run_id",
    "now_ms",
    # logging
    "create_run_log",
    "emit_warning",
    "complete_run_log",
    "save_run_log",
    # store
    "ProjectStore",
]
