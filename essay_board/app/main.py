"""
Main entrypoint for the Essay Board API.

This module assembles the FastAPI application, sets up logging and
includes the versioned routers.  The ``create_app`` function builds and
configures the app, which is then instantiated at module import time as
``app``, so it can be served directly, e.g.::

    uvicorn essay_board.app.main:app --reload

The record store is created here, once per application, and handed to
the request handlers through ``app.state``.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.v1.router import router as v1_router
from .core.config import Settings, get_database_path, settings as default_settings
from .core.db import JSONStorage
from .core.logging_config import setup_logging
from .services.essay_service import EssayService
from .services.user_service import UserService

logger = logging.getLogger(__name__)


def _field_errors(exc: RequestValidationError) -> List[Dict[str, Any]]:
    """Flatten pydantic errors into ``{"field", "message"}`` pairs."""
    errors = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ())]
        if error.get("type") == "json_invalid" or len(location) < 2:
            field = location[0] if location else "body"
        else:
            field = ".".join(location[1:])
        errors.append({"field": field, "message": error.get("msg", "Invalid value")})
    return errors


def create_app(settings: Optional[Settings] = None, storage: Optional[JSONStorage] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Configuration to use.  Defaults to the module-level settings
        read from the environment.
    storage : Optional[JSONStorage]
        Pre-built storage.  When omitted, a storage for the configured
        data file is created.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    settings = settings or default_settings
    # Initialise logging before anything else so that the services
    # below can log during construction.
    setup_logging(settings.log_level, settings.log_file or None)

    storage = storage or JSONStorage(get_database_path(settings))

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)
    app.state.settings = settings
    app.state.storage = storage
    app.state.essay_service = EssayService(storage)
    app.state.user_service = UserService(storage)

    if settings.cors_origin_list:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origin_list,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": "Validation failed", "errors": _field_errors(exc)},
        )

    # The web client calls /api/essays; /api/v1 is the versioned alias.
    app.include_router(v1_router, prefix="/api")
    app.include_router(v1_router, prefix="/api/v1")

    @app.on_event("startup")
    async def startup_event() -> None:
        storage.init_db()
        logger.info("Serving essays from %s", storage.path)

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
