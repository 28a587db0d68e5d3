"""
Durable Blob: 프로젝트 목록 전체를 담는 단일 슬롯.

규칙:
- "전체 읽기 / 전체 쓰기" 만 제공 (증분 diff 없음)
- 없으면 None (빈 목록으로 취급은 store 책임)
- 원자적 쓰기: temp → rename + fsync

파일시스템 안정성 (best-effort):
- fsync로 가능한 환경에서 내구성 강화 (파일 + 디렉토리)
- fsync 실패 시 경고 남기고 계속 진행
"""

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from src.domain.constants import STORAGE_BLOB_NAME, STORAGE_BLOB_SUFFIX

logger = logging.getLogger(__name__)

# =============================================================================
# Atomic Write
# =============================================================================


def _fsync_dir(dir_path: Path) -> None:
    """
    디렉토리 fsync (가능한 환경에서).

    rename 후 디렉토리 엔트리까지 내구성을 강화하려면 필요.

    Args:
        dir_path: fsync할 디렉토리 경로
    """
    try:
        dir_fd = os.open(str(dir_path), os.O_RDONLY | os.O_DIRECTORY)
        try:
            os.fsync(dir_fd)
        finally:
            os.close(dir_fd)
    except (OSError, AttributeError) as e:
        # O_DIRECTORY 미지원, 권한 문제 등
        logger.warning(
            f"Directory fsync failed for {dir_path}: {e}. "
            f"Rename durability may not be guaranteed."
        )


def atomic_write_text(path: Path, content: str) -> None:
    """
    원자적 텍스트 쓰기.

    동작:
    - 중간 상태 없음: temp → rename
    - 실패 시 cleanup: temp 파일 삭제
    - 기존 파일 보존: rename 실패 시 원본 유지

    Args:
        path: 저장할 파일 경로
        content: 파일 내용
    """
    dir_path = path.parent
    dir_path.mkdir(parents=True, exist_ok=True)

    temp_path = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            dir=dir_path,
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        ) as f:
            temp_path = Path(f.name)
            f.write(content)
            f.flush()
            try:
                os.fsync(f.fileno())
            except OSError as e:
                logger.warning(
                    f"File fsync failed for {path}: {e}. "
                    f"Data may not be durable on power loss."
                )

        os.replace(temp_path, path)

        _fsync_dir(dir_path)

    except Exception:
        if temp_path and temp_path.exists():
            try:
                temp_path.unlink()
            except OSError:
                pass
        raise


def atomic_write_json(path: Path, data: Any) -> None:
    """원자적 JSON 쓰기 (indent=2, 비ASCII 유지)."""
    atomic_write_text(path, json.dumps(data, indent=2, ensure_ascii=False))


# =============================================================================
# Blob Stores
# =============================================================================


class BlobStore(ABC):
    """
    Durable blob 추상 인터페이스.

    구현체는 파일, 임베디드 DB 등 무엇이든 가능.
    "전체 읽기 / 전체 쓰기" 의미론만 지키면 된다.
    """

    @abstractmethod
    def read_blob(self) -> str | None:
        """저장된 blob 원문. 없으면 None."""
        ...

    @abstractmethod
    def write_blob(self, content: str) -> None:
        """blob 전체 덮어쓰기."""
        ...


class FileBlobStore(BlobStore):
    """
    파일 기반 blob.

    Usage:
        blob = FileBlobStore(Path("data"))
        blob.write_blob("[]")
        blob.read_blob()  # "[]"
    """

    def __init__(self, data_dir: Path, name: str = STORAGE_BLOB_NAME):
        """
        Args:
            data_dir: blob 파일이 놓일 디렉토리
            name: 슬롯 이름 (파일명 = name + .json)
        """
        self.data_dir = data_dir
        self.name = name
        self.path = data_dir / f"{name}{STORAGE_BLOB_SUFFIX}"

    def read_blob(self) -> str | None:
        if not self.path.exists():
            return None
        return self.path.read_text(encoding="utf-8")

    def write_blob(self, content: str) -> None:
        atomic_write_text(self.path, content)


class MemoryBlobStore(BlobStore):
    """프로세스 메모리 blob (테스트/임시 실행용)."""

    def __init__(self, content: str | None = None):
        self.content = content
        self.writes = 0

    def read_blob(self) -> str | None:
        return self.content

    def write_blob(self, content: str) -> None:
        self.content = content
        self.writes += 1
