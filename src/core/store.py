"""
Project Store: 프로젝트 목록의 유일한 진실 원천 (메모리) + durable blob 미러.

규칙:
- 목록 순서 = 삽입 순서, 최신이 앞 (보조 정렬 없음)
- id 는 store 안에서 고유
- add/update/remove 마다 전체 persist (증분 diff 없음)
- in-memory 변경과 blob 쓰기 사이에 트랜잭션 없음:
  쓰기 실패 시 메모리는 이미 바뀐 상태로 예외 전파
- load: blob 없음/손상 → 빈 목록 + 로그 (절대 raise 안 함)
"""

import json
import logging
from collections.abc import Iterator

from src.core.blob import BlobStore
from src.domain.errors import ErrorCodes, ProjectRejectError
from src.domain.schemas import Project

logger = logging.getLogger(__name__)


class ProjectStore:
    """
    프로젝트 목록 관리.

    Usage:
        store = ProjectStore(FileBlobStore(Path("data")))
        store.load()
        store.add(project)
        store.update(project.id, "New name", "New description")
        store.remove(project.id)
    """

    def __init__(self, blob: BlobStore):
        """
        Args:
            blob: durable blob 구현체
        """
        self.blob = blob
        self._projects: list[Project] = []

    # =========================================================================
    # Load / Persist
    # =========================================================================

    def load(self) -> list[Project]:
        """
        blob → 메모리 목록.

        손상된 blob(UTF-8 디코딩 실패, JSON 파싱 실패, 배열 아님, 레코드 형식 오류)은
        빈 목록으로 대체하고 로그만 남긴다.

        Returns:
            로드된 프로젝트 목록 (사본)
        """
        try:
            raw = self.blob.read_blob()
            if raw is None:
                self._projects = []
                return self.projects

            data = json.loads(raw)
            if not isinstance(data, list):
                raise TypeError(f"expected a JSON array, got {type(data).__name__}")
            projects = [Project.from_dict(item) for item in data]
        except (UnicodeDecodeError, json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            logger.error(
                f"[{ErrorCodes.STORE_BLOB_CORRUPT}] Failed to load projects: {e}. "
                f"Continuing with an empty list."
            )
            self._projects = []
            return self.projects

        self._projects = self._dedupe(projects)
        logger.info(f"Loaded {len(self._projects)} projects")
        return self.projects

    def persist(self) -> None:
        """메모리 목록 전체를 blob에 덮어쓰기."""
        content = json.dumps(
            [p.to_dict() for p in self._projects],
            indent=2,
            ensure_ascii=False,
        )
        self.blob.write_blob(content)

    # =========================================================================
    # Mutations
    # =========================================================================

    def add(self, project: Project) -> Project:
        """
        맨 앞에 추가 (newest-first).

        Raises:
            ProjectRejectError: DUPLICATE_PROJECT_ID
        """
        if self.get(project.id) is not None:
            raise ProjectRejectError(
                ErrorCodes.DUPLICATE_PROJECT_ID,
                project_id=project.id,
            )

        self._projects.insert(0, project)
        self.persist()
        return project

    def update(self, project_id: str, name: str, description: str) -> Project | None:
        """
        name/description 교체 (제자리).

        id, created_at, full_prd, image_url 은 유지.

        Returns:
            갱신된 Project, 없는 id 면 None (no-op, persist 안 함)
        """
        for index, project in enumerate(self._projects):
            if project.id == project_id:
                updated = project.with_details(name, description)
                self._projects[index] = updated
                self.persist()
                return updated
        return None

    def remove(self, project_id: str) -> bool:
        """
        id 로 제거.

        Returns:
            제거 여부 (없는 id 면 False, persist 안 함)
        """
        remaining = [p for p in self._projects if p.id != project_id]
        if len(remaining) == len(self._projects):
            return False

        self._projects = remaining
        self.persist()
        return True

    # =========================================================================
    # Queries
    # =========================================================================

    def get(self, project_id: str) -> Project | None:
        for project in self._projects:
            if project.id == project_id:
                return project
        return None

    def ids(self) -> set[str]:
        return {p.id for p in self._projects}

    @property
    def projects(self) -> list[Project]:
        """현재 목록 사본 (newest-first)."""
        return list(self._projects)

    def __len__(self) -> int:
        return len(self._projects)

    def __iter__(self) -> Iterator[Project]:
        return iter(self.projects)

    # =========================================================================
    # Internal
    # =========================================================================

    @staticmethod
    def _dedupe(projects: list[Project]) -> list[Project]:
        """
        중복 id 제거 (앞쪽 = 최신 우선).

        외부에서 손으로 편집된 blob에서도 id 고유성 유지.
        """
        seen: set[str] = set()
        result: list[Project] = []
        for project in projects:
            if project.id in seen:
                logger.warning(f"Dropping duplicate project id from blob: {project.id}")
                continue
            seen.add(project.id)
            result.append(project)
        return result
