"""
Pytest fixtures for PromptMaster tests.

테스트 구성:
- 정상 케이스, 필수 필드 누락 케이스, 생성 단계 실패 케이스 분리
- 외부 생성 서비스는 항상 mock (네트워크 호출 없음)
"""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
import yaml

from src.app.providers.base import (
    GenerationProvider,
    ImageResponse,
    InlineImage,
    MediaPart,
)
from src.app.services.generation import GenerationSettings, GenerationWorkflow
from src.app.services.projects import ProjectService
from src.app.state import AppStateMachine
from src.core.blob import MemoryBlobStore
from src.core.store import ProjectStore
from src.domain.schemas import Project

# =============================================================================
# Path / Config Fixtures
# =============================================================================

@pytest.fixture
def project_root() -> Path:
    """프로젝트 루트 경로."""
    return Path(__file__).parent.parent


@pytest.fixture
def default_config(project_root: Path) -> dict:
    """기본 설정 로드."""
    with open(project_root / "default.yaml", encoding="utf-8") as f:
        return yaml.safe_load(f)


@pytest.fixture
def test_config(tmp_path: Path) -> dict:
    """테스트용 설정 (tmp 디렉토리 사용)."""
    return {
        "storage": {
            "data_dir": str(tmp_path / "data"),
            "blob_name": "promptmaster_projects",
        },
        "generation": {
            "text_model": "gemini-2.5-flash",
            "image_model": "gemini-2.5-flash-image",
            "temperature": 0.7,
        },
        "logging": {"level": "DEBUG"},
    }


# =============================================================================
# Project Fixtures
# =============================================================================

@pytest.fixture
def sample_project() -> Project:
    """AI로 생성된 프로젝트."""
    return Project(
        id="1718000000000",
        name="FitTracker",
        description="Track workouts",
        full_prd="# PRD...",
        image_url="data:image/png;base64,QUJD",
        created_at=1718000000000,
        model_used="Gemini 2.5 Flash",
    )


@pytest.fixture
def manual_project() -> Project:
    """직접 입력한 프로젝트 (아이콘 없음)."""
    return Project(
        id="1718000005000",
        name="CookMaster",
        description="Recipe organizer",
        full_prd="Recipe organizer",
        created_at=1718000005000,
        model_used="Manual",
    )


# =============================================================================
# Store Fixtures
# =============================================================================

@pytest.fixture
def memory_blob() -> MemoryBlobStore:
    """빈 메모리 blob."""
    return MemoryBlobStore()


@pytest.fixture
def store(memory_blob: MemoryBlobStore) -> ProjectStore:
    """로드된 빈 store."""
    project_store = ProjectStore(memory_blob)
    project_store.load()
    return project_store


# =============================================================================
# Provider Fixtures
# =============================================================================

def make_image_response(data: bytes | str = "QUJD", mime_type: str | None = "image/png") -> ImageResponse:
    """inline 이미지 part 하나짜리 응답."""
    return ImageResponse(
        parts=[MediaPart(inline_data=InlineImage(data=data, mime_type=mime_type))],
        model_used="gemini-2.5-flash-image",
    )


@pytest.fixture
def image_response():
    """ImageResponse 팩토리."""
    return make_image_response


@pytest.fixture
def mock_provider() -> MagicMock:
    """
    FitTracker 시나리오 provider.

    - 문서: "# PRD..."
    - 이미지: image/png, "QUJD"
    """
    provider = MagicMock(spec=GenerationProvider)
    provider.generate_text = AsyncMock(return_value="# PRD...")
    provider.generate_image = AsyncMock(return_value=make_image_response())
    return provider


@pytest.fixture
def workflow(mock_provider: MagicMock) -> GenerationWorkflow:
    return GenerationWorkflow(mock_provider, GenerationSettings())


@pytest.fixture
def service(store: ProjectStore, workflow: GenerationWorkflow) -> ProjectService:
    return ProjectService(store, workflow)


@pytest.fixture
def machine(service: ProjectService) -> AppStateMachine:
    return AppStateMachine(service)
