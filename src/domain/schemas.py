"""
Data schemas for PromptMaster.

규칙:
- blob 직렬화 키는 camelCase 유지 (기존 localStorage blob 호환)
- id, created_at, full_prd, image_url 은 생성 후 불변
- name, description 만 edit 으로 변경 가능
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

# =============================================================================
# Enums
# =============================================================================


class AppView(str, Enum):
    """화면 상태."""
    LISTING = "listing"
    COMPOSING = "composing"
    VIEWING = "viewing"


class CreationMode(str, Enum):
    """프로젝트 생성 경로."""
    AI = "ai"
    MANUAL = "manual"


class IconStatus(str, Enum):
    """
    아이콘 생성 단계 결과.

    not_returned: 서비스가 응답했지만 inline 이미지가 없음 (거절/빈 응답)
    failed: 호출 자체가 예외로 실패 (서비스 도달 불가, 인증 오류 등)
    """
    GENERATED = "generated"
    NOT_RETURNED = "not_returned"
    FAILED = "failed"
    SKIPPED = "skipped"


# =============================================================================
# Core Schemas
# =============================================================================


@dataclass(frozen=True)
class Project:
    """
    프로젝트 레코드.

    blob 키 매핑:
    - full_prd → fullPrd
    - image_url → imageUrl (없으면 생략)
    - created_at → createdAt (epoch ms)
    - model_used → modelUsed
    """
    id: str
    name: str
    description: str
    full_prd: str
    created_at: int
    model_used: str
    image_url: str | None = None

    def with_details(self, name: str, description: str) -> "Project":
        """name/description 만 바꾼 사본."""
        return replace(self, name=name, description=description)

    def to_dict(self) -> dict[str, Any]:
        """JSON 직렬화용 (blob 포맷)."""
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "fullPrd": self.full_prd,
            "createdAt": self.created_at,
            "modelUsed": self.model_used,
        }
        if self.image_url is not None:
            data["imageUrl"] = self.image_url
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Project":
        """
        blob 레코드 → Project.

        Raises:
            KeyError: 필수 키 누락
            TypeError: 레코드/필드 타입 불일치
            ValueError: name/description 이 비어 있음
        """
        if not isinstance(data, dict):
            raise TypeError(f"project record must be an object, got {type(data).__name__}")

        for key in ("name", "description", "fullPrd"):
            if not isinstance(data[key], str):
                raise TypeError(f"{key} must be a string, got {type(data[key]).__name__}")
        for key in ("name", "description"):
            if not data[key].strip():
                raise ValueError(f"{key} must not be blank")

        image_url = data.get("imageUrl")
        return cls(
            id=str(data["id"]),
            name=data["name"],
            description=data["description"],
            full_prd=data["fullPrd"],
            created_at=int(data["createdAt"]),
            model_used=str(data.get("modelUsed", "")),
            image_url=str(image_url) if image_url else None,
        )


@dataclass
class GenerateResult:
    """
    Generation Workflow 결과.

    document: PRD 본문 (실패 시 fallback 문자열)
    icon: data URI (없으면 None)
    """
    document: str
    icon: str | None = None
    document_ok: bool = True
    icon_status: IconStatus = IconStatus.SKIPPED

    def to_dict(self) -> dict[str, Any]:
        return {
            "document": self.document,
            "icon": self.icon,
            "document_ok": self.document_ok,
            "icon_status": self.icon_status.value,
        }


# =============================================================================
# Generation Run Log Schemas
# =============================================================================


@dataclass
class WarningLog:
    """
    생성 단계 경고.

    필수 컨텍스트: level, code, step, message
    """
    level: str
    code: str
    step: str  # document, icon
    message: str
    detail: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "level": self.level,
            "code": self.code,
            "step": self.step,
            "message": self.message,
            "detail": self.detail,
        }


@dataclass
class GenerationRunLog:
    """생성 1회 실행 기록."""
    run_id: str
    project_name: str
    started_at: str
    result: str  # pending, success, failed
    finished_at: str | None = None
    text_model: str | None = None
    image_model: str | None = None
    icon_status: str | None = None
    warnings: list[WarningLog] = field(default_factory=list)
    error_code: str | None = None
    error_context: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "run_id": self.run_id,
            "project_name": self.project_name,
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            "result": self.result,
            "text_model": self.text_model,
            "image_model": self.image_model,
            "icon_status": self.icon_status,
            "warnings": [w.to_dict() for w in self.warnings],
            "error_code": self.error_code,
            "error_context": self.error_context,
        }
