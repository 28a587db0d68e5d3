"""
Application Services.

역할:
- generation: PRD + 아이콘 생성 workflow
- projects: AI/manual 생성 경로, 편집, 삭제
"""

from .generation import GenerationSettings, GenerationWorkflow
from .projects import ProjectService, validate_fields

__all__ = [
    "GenerationSettings",
    "GenerationWorkflow",
    "ProjectService",
    "validate_fields",
]
