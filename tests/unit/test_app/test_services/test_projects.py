"""
test_projects.py - Project Service 테스트

DoD:
- AI 경로: 문서 + 아이콘으로 레코드 생성, modelUsed = AI 태그
- Manual 경로: 외부 호출 없음, 빈 문서 → description
- 필수 필드 누락 → 호출/저장 전에 거절
- 예상 밖 workflow 실패 → 레코드 없음
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.app.services.generation import GenerationWorkflow
from src.app.services.projects import ProjectService, validate_fields
from src.core.blob import MemoryBlobStore
from src.core.store import ProjectStore
from src.domain.constants import MODEL_USED_AI, MODEL_USED_MANUAL
from src.domain.errors import ErrorCodes, ProjectRejectError

# =============================================================================
# validate_fields 테스트
# =============================================================================


class TestValidateFields:
    def test_strips(self):
        assert validate_fields("  FitTracker ", " Track workouts\n") == (
            "FitTracker",
            "Track workouts",
        )

    @pytest.mark.parametrize(
        ("name", "description", "missing"),
        [
            ("", "desc", ["name"]),
            ("name", "   ", ["description"]),
            ("", "", ["name", "description"]),
        ],
    )
    def test_missing(self, name, description, missing):
        with pytest.raises(ProjectRejectError) as exc_info:
            validate_fields(name, description)

        assert exc_info.value.code == ErrorCodes.MISSING_REQUIRED_FIELD
        assert exc_info.value.context["fields"] == missing


# =============================================================================
# AI 경로
# =============================================================================


class TestCreateWithAI:
    """create_with_ai 테스트."""

    @pytest.mark.asyncio
    async def test_creates_record(self, service: ProjectService, store: ProjectStore):
        project = await service.create_with_ai("FitTracker", "Track workouts")

        assert project.name == "FitTracker"
        assert project.description == "Track workouts"
        assert project.full_prd == "# PRD..."
        assert project.image_url == "data:image/png;base64,QUJD"
        assert project.model_used == MODEL_USED_AI
        assert project.id == str(project.created_at)
        assert store.projects == [project]

    @pytest.mark.asyncio
    async def test_newest_first(self, service: ProjectService, store: ProjectStore):
        first = await service.create_with_ai("A", "a")
        second = await service.create_with_ai("B", "b")

        assert [p.id for p in store.projects] == [second.id, first.id]
        assert first.id != second.id

    @pytest.mark.asyncio
    async def test_icon_missing_still_saved(
        self, service: ProjectService, mock_provider: MagicMock
    ):
        mock_provider.generate_image = AsyncMock(side_effect=RuntimeError("down"))

        project = await service.create_with_ai("FitTracker", "Track workouts")

        assert project.image_url is None
        assert project.model_used == MODEL_USED_AI

    @pytest.mark.asyncio
    async def test_missing_fields_no_calls(
        self, service: ProjectService, store: ProjectStore, mock_provider: MagicMock
    ):
        with pytest.raises(ProjectRejectError) as exc_info:
            await service.create_with_ai("", "Track workouts")

        assert exc_info.value.code == ErrorCodes.MISSING_REQUIRED_FIELD
        mock_provider.generate_text.assert_not_awaited()
        mock_provider.generate_image.assert_not_awaited()
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_unexpected_failure_no_record(
        self, store: ProjectStore, memory_blob: MemoryBlobStore
    ):
        workflow = MagicMock(spec=GenerationWorkflow)
        workflow.generate = AsyncMock(side_effect=RuntimeError("event loop closed"))
        service = ProjectService(store, workflow)

        with pytest.raises(ProjectRejectError) as exc_info:
            await service.create_with_ai("FitTracker", "Track workouts")

        assert exc_info.value.code == ErrorCodes.GENERATION_FAILED
        assert len(store) == 0
        assert memory_blob.writes == 0

    @pytest.mark.asyncio
    async def test_no_workflow(self, store: ProjectStore):
        with pytest.raises(ProjectRejectError) as exc_info:
            await ProjectService(store).create_with_ai("FitTracker", "Track workouts")

        assert exc_info.value.code == ErrorCodes.GENERATION_FAILED


# =============================================================================
# Manual 경로
# =============================================================================


class TestCreateManual:
    """create_manual 테스트."""

    def test_uses_document(self, service: ProjectService, mock_provider: MagicMock):
        project = service.create_manual("CookMaster", "Recipe organizer", document="# Recipes")

        assert project.full_prd == "# Recipes"
        assert project.image_url is None
        assert project.model_used == MODEL_USED_MANUAL
        mock_provider.generate_text.assert_not_called()
        mock_provider.generate_image.assert_not_called()

    @pytest.mark.parametrize("document", [None, "", "   "])
    def test_blank_document_falls_back_to_description(
        self, service: ProjectService, document
    ):
        project = service.create_manual("CookMaster", "Recipe organizer", document=document)

        assert project.full_prd == "Recipe organizer"

    def test_missing_fields(self, service: ProjectService, store: ProjectStore):
        with pytest.raises(ProjectRejectError):
            service.create_manual("CookMaster", "", document="# Recipes")

        assert len(store) == 0

    def test_persisted(self, service: ProjectService, memory_blob: MemoryBlobStore):
        project = service.create_manual("CookMaster", "Recipe organizer")

        assert ProjectStore(memory_blob).load() == [project]


# =============================================================================
# Edit / Delete
# =============================================================================


class TestEditAndDelete:
    def test_edit(self, service: ProjectService):
        project = service.create_manual("CookMaster", "Recipe organizer", document="# Recipes")

        updated = service.edit(project.id, "CookPro", "Better recipes")

        assert updated.name == "CookPro"
        assert updated.full_prd == "# Recipes"
        assert updated.created_at == project.created_at

    def test_edit_unknown(self, service: ProjectService):
        with pytest.raises(ProjectRejectError) as exc_info:
            service.edit("404", "x", "y")

        assert exc_info.value.code == ErrorCodes.PROJECT_NOT_FOUND

    def test_edit_blank_rejected(self, service: ProjectService):
        project = service.create_manual("CookMaster", "Recipe organizer")

        with pytest.raises(ProjectRejectError):
            service.edit(project.id, " ", "y")

        assert service.store.get(project.id).name == "CookMaster"

    def test_delete(self, service: ProjectService, store: ProjectStore):
        project = service.create_manual("CookMaster", "Recipe organizer")

        assert service.delete(project.id) is True
        assert service.delete(project.id) is False
        assert len(store) == 0
