"""Domain layer: errors and schemas."""

from .errors import ErrorCodes, ProjectRejectError
from .schemas import (
    AppView,
    CreationMode,
    GenerateResult,
    GenerationRunLog,
    IconStatus,
    Project,
)

__all__ = [
    "ErrorCodes",
    "ProjectRejectError",
    "AppView",
    "CreationMode",
    "GenerateResult",
    "GenerationRunLog",
    "IconStatus",
    "Project",
]
