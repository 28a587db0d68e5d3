"""
FastAPI Routes.

페이지 라우트 (HTML) + API 라우트 (REST)
"""

from . import projects, runs

__all__ = ["projects", "runs"]
