"""
FastAPI dependencies shared by the endpoint modules.

Services are created once in ``main.create_app`` and stored on
``app.state``; these helpers hand them to the route functions.
"""

from fastapi import Request

from ..core.config import Settings
from ..services.essay_service import EssayService


def get_essay_service(request: Request) -> EssayService:
    return request.app.state.essay_service


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
