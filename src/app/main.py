"""
FastAPI 애플리케이션 진입점.

실행:
- 개발: uv run uvicorn src.app.main:app --reload
- 프로덕션: uv run uvicorn src.app.main:app
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from src.app.providers.base import GenerationProvider
from src.app.providers.gemini import GeminiProvider
from src.app.routes import projects, runs
from src.app.services.generation import GenerationSettings, GenerationWorkflow
from src.app.services.projects import ProjectService
from src.app.state import AppStateMachine
from src.core.blob import BlobStore, FileBlobStore
from src.core.store import ProjectStore
from src.domain.constants import (
    DEFAULT_DATA_DIR,
    DEFAULT_IMAGE_MODEL,
    DEFAULT_TEMPERATURE,
    DEFAULT_TEXT_MODEL,
    STORAGE_BLOB_NAME,
)

PROJECT_ROOT = Path(__file__).parent.parent.parent

logger = logging.getLogger(__name__)

# =============================================================================
# Configuration
# =============================================================================


def load_config(config_path: Path | None = None) -> dict:
    """설정 파일 로드."""
    if config_path is None:
        # 프로젝트 루트의 default.yaml
        config_path = PROJECT_ROOT / "default.yaml"

    if not config_path.exists():
        return {}

    with open(config_path, encoding="utf-8") as f:
        data: dict[Any, Any] = yaml.safe_load(f) or {}
        return data


def _resolve_path(raw: str) -> Path:
    """상대 경로는 프로젝트 루트 기준."""
    path = Path(raw)
    return path if path.is_absolute() else PROJECT_ROOT / path


def configure_logging(config: dict) -> None:
    """config.logging.level 로 root logger 설정."""
    level = str(config.get("logging", {}).get("level", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def build_machine(
    config: dict,
    provider: GenerationProvider | None = None,
    blob: BlobStore | None = None,
) -> AppStateMachine:
    """
    config → store + workflow + state machine 조립.

    Args:
        config: load_config() 결과
        provider: 생성 provider (None이면 GeminiProvider)
        blob: durable blob (None이면 config의 data_dir 파일)

    Returns:
        blob 로드까지 끝난 AppStateMachine
    """
    storage_cfg = config.get("storage", {})
    generation_cfg = config.get("generation", {})

    if blob is None:
        data_dir = _resolve_path(storage_cfg.get("data_dir") or DEFAULT_DATA_DIR)
        blob = FileBlobStore(data_dir, storage_cfg.get("blob_name", STORAGE_BLOB_NAME))

    store = ProjectStore(blob)
    store.load()

    run_logs_dir = generation_cfg.get("run_logs_dir")
    settings = GenerationSettings(
        text_model=generation_cfg.get("text_model", DEFAULT_TEXT_MODEL),
        image_model=generation_cfg.get("image_model", DEFAULT_IMAGE_MODEL),
        temperature=float(generation_cfg.get("temperature", DEFAULT_TEMPERATURE)),
        top_p=generation_cfg.get("top_p"),
        max_output_tokens=generation_cfg.get("max_output_tokens"),
        run_logs_dir=_resolve_path(run_logs_dir) if run_logs_dir else None,
    )
    workflow = GenerationWorkflow(provider or GeminiProvider(), settings)

    return AppStateMachine(ProjectService(store, workflow))


# =============================================================================
# App Factory
# =============================================================================


def create_app(
    config: dict | None = None,
    provider: GenerationProvider | None = None,
    blob: BlobStore | None = None,
) -> FastAPI:
    """
    FastAPI 앱 생성.

    테스트에서는 config/provider/blob 을 주입한다.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """
        애플리케이션 생명주기 관리.

        시작 시: .env/설정 로드, store 로드
        """
        load_dotenv()
        app.state.config = config if config is not None else load_config()
        configure_logging(app.state.config)
        app.state.machine = build_machine(app.state.config, provider=provider, blob=blob)
        logger.info(f"Loaded {len(app.state.machine.projects)} projects")

        yield

    app = FastAPI(
        title="PromptMaster AI",
        description="앱 아이디어 → PRD 문서 + 앱 아이콘 생성",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Static files (CSS)
    static_dir = Path(__file__).parent / "static"
    if static_dir.exists():
        app.mount("/static", StaticFiles(directory=static_dir), name="static")

    # 페이지 라우트 (HTML)
    app.include_router(projects.router, prefix="", tags=["Projects"])

    # API 라우트
    app.include_router(projects.api_router, prefix="/api/projects", tags=["Projects API"])
    app.include_router(runs.api_router, prefix="/api/runs", tags=["Run Logs API"])

    @app.get("/health")
    async def health() -> dict[str, str]:
        """헬스 체크."""
        return {"status": "ok"}

    return app


# =============================================================================
# App Instance
# =============================================================================

app = create_app()


# =============================================================================
# CLI Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.app.main:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
    )
