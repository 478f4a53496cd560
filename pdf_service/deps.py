"""
Request dependencies.

The settings, allow-list policy, job queue and renderer are created once in
the application lifespan and stored on ``app.state``; routers receive them
through these providers.
"""

from typing import Optional

from fastapi import Request

from .config import Settings
from .services.allow_list import AllowListPolicy
from .services.job_queue import JobQueue
from .services.renderer import PdfRenderer


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_policy(request: Request) -> Optional[AllowListPolicy]:
    """Allow-list policy, or None when ALLOWED_DOMAINS is unusable."""
    return request.app.state.policy


def get_job_queue(request: Request) -> JobQueue:
    return request.app.state.job_queue


def get_renderer(request: Request) -> PdfRenderer:
    return request.app.state.renderer
