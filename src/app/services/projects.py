"""
Project Service: 프로젝트 생성/수정 경로.

생성 경로:
- AI: GenerationWorkflow 결과로 레코드 생성 (modelUsed = AI 태그)
- Manual: 외부 호출 없음, 문서 비어 있으면 description 사용, 아이콘 없음

규칙:
- 검증 실패 → 상태 변경/외부 호출 전에 ProjectRejectError
- 예상 밖 workflow 실패 → GENERATION_FAILED, 부분 레코드 저장 안 함
"""

import logging

from src.app.services.generation import GenerationWorkflow
from src.core.ids import generate_project_id, now_ms
from src.core.store import ProjectStore
from src.domain.constants import MODEL_USED_AI, MODEL_USED_MANUAL
from src.domain.errors import ErrorCodes, ProjectRejectError
from src.domain.schemas import Project

logger = logging.getLogger(__name__)


def validate_fields(name: str, description: str) -> tuple[str, str]:
    """
    name/description 필수 검증.

    Returns:
        (name, description) 앞뒤 공백 제거본

    Raises:
        ProjectRejectError: MISSING_REQUIRED_FIELD
    """
    missing = [
        field_name
        for field_name, value in (("name", name), ("description", description))
        if not (value or "").strip()
    ]
    if missing:
        raise ProjectRejectError(
            ErrorCodes.MISSING_REQUIRED_FIELD,
            fields=missing,
        )
    return name.strip(), description.strip()


class ProjectService:
    """
    store + workflow 조합.

    Usage:
        service = ProjectService(store, workflow)
        project = await service.create_with_ai("FitTracker", "Track workouts")
        project = service.create_manual("Notes", "Simple notes", document="")
    """

    def __init__(self, store: ProjectStore, workflow: GenerationWorkflow | None = None):
        self.store = store
        self.workflow = workflow

    async def create_with_ai(self, name: str, description: str) -> Project:
        """
        AI 경로로 생성 후 store 맨 앞에 추가.

        Raises:
            ProjectRejectError: MISSING_REQUIRED_FIELD, GENERATION_FAILED
        """
        name, description = validate_fields(name, description)

        if self.workflow is None:
            raise ProjectRejectError(
                ErrorCodes.GENERATION_FAILED,
                reason="generation workflow not configured",
            )

        try:
            result = await self.workflow.generate(name, description)
        except Exception as e:
            logger.error(f"Project generation failed for {name!r}: {e}", exc_info=True)
            raise ProjectRejectError(
                ErrorCodes.GENERATION_FAILED,
                name=name,
                error=str(e),
            ) from e

        created_at = now_ms()
        project = Project(
            id=generate_project_id(self.store.ids(), now=created_at),
            name=name,
            description=description,
            full_prd=result.document,
            image_url=result.icon,
            created_at=created_at,
            model_used=MODEL_USED_AI,
        )
        self.store.add(project)
        logger.info(
            f"Created project {project.id} ({name!r}) via AI, "
            f"icon={result.icon_status.value}"
        )
        return project

    def create_manual(
        self,
        name: str,
        description: str,
        document: str | None = None,
    ) -> Project:
        """
        Manual 경로로 생성 후 store 맨 앞에 추가.

        Raises:
            ProjectRejectError: MISSING_REQUIRED_FIELD
        """
        name, description = validate_fields(name, description)
        full_prd = document if document and document.strip() else description

        created_at = now_ms()
        project = Project(
            id=generate_project_id(self.store.ids(), now=created_at),
            name=name,
            description=description,
            full_prd=full_prd,
            image_url=None,
            created_at=created_at,
            model_used=MODEL_USED_MANUAL,
        )
        self.store.add(project)
        logger.info(f"Created project {project.id} ({name!r}) manually")
        return project

    def edit(self, project_id: str, name: str, description: str) -> Project:
        """
        name/description 수정.

        Raises:
            ProjectRejectError: MISSING_REQUIRED_FIELD, PROJECT_NOT_FOUND
        """
        name, description = validate_fields(name, description)
        updated = self.store.update(project_id, name, description)
        if updated is None:
            raise ProjectRejectError(ErrorCodes.PROJECT_NOT_FOUND, project_id=project_id)
        return updated

    def delete(self, project_id: str) -> bool:
        """삭제 (없는 id 는 no-op)."""
        removed = self.store.remove(project_id)
        if removed:
            logger.info(f"Deleted project {project_id}")
        return removed
