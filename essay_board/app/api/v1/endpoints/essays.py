"""
Essay endpoints for API v1.

These routes expose the essay feed: a paginated listing (newest first),
retrieval of a single essay, submission, editing and deletion.  There is
no authentication; the web client limits edit and delete to a short
grace window after posting, but the API itself does not enforce it.

Storage failures are logged here and reported to the caller as a
generic 500 response without internal details.
"""

import logging
from typing import Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from essay_board.app.api.deps import get_essay_service, get_settings
from essay_board.app.core.config import Settings
from essay_board.app.core.db import StorageError
from essay_board.app.schemas.essay import EssayCreate, EssayPage, EssayRead, EssayUpdate
from essay_board.app.services.essay_service import EssayService

logger = logging.getLogger(__name__)

router = APIRouter()

NOT_FOUND = "Essay not found"


def _positive_int(raw: Optional[str], default: int) -> int:
    """Parse a query value, falling back to ``default`` when unusable."""
    if raw is None:
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        return default
    return value if value >= 1 else default


@router.get("", response_model=EssayPage)
async def list_essays(
    page: Optional[str] = Query(None, description="1-based page number"),
    limit: Optional[str] = Query(None, description="Essays per page"),
    service: EssayService = Depends(get_essay_service),
    settings: Settings = Depends(get_settings),
) -> EssayPage:
    """Return one page of essays, newest first, with the total count.

    Missing or invalid ``page``/``limit`` values fall back to the first
    page and the default page size.  Any positive ``limit`` is honoured.
    A page past the end returns an empty list.
    """
    page_number = _positive_int(page, 1)
    page_size = _positive_int(limit, settings.default_page_size)
    try:
        return await service.list_essays(page=page_number, limit=page_size)
    except StorageError:
        logger.exception("Error fetching essays")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to fetch essays")


@router.get("/{essay_id}", response_model=EssayRead)
async def get_essay(essay_id: str, service: EssayService = Depends(get_essay_service)) -> EssayRead:
    """Retrieve a single essay by its ID."""
    try:
        essay = await service.get_essay(essay_id)
    except StorageError:
        logger.exception("Error fetching essay %s", essay_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to fetch essay")
    if essay is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)
    return essay


@router.post("", response_model=EssayRead, status_code=status.HTTP_201_CREATED)
async def create_essay(
    essay_in: EssayCreate,
    service: EssayService = Depends(get_essay_service),
) -> EssayRead:
    """Submit a new essay recommendation."""
    try:
        return await service.create_essay(essay_in)
    except StorageError:
        logger.exception("Error creating essay")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to create essay")


@router.put("/{essay_id}", response_model=EssayRead)
async def update_essay(
    essay_id: str,
    essay_in: EssayUpdate,
    service: EssayService = Depends(get_essay_service),
) -> EssayRead:
    """Edit an essay.

    Partial updates are supported; fields missing from the body remain
    unchanged.  ``id`` and ``createdAt`` can never be changed.
    """
    try:
        essay = await service.update_essay(essay_id, essay_in)
    except StorageError:
        logger.exception("Error updating essay %s", essay_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update essay")
    if essay is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)
    return essay


@router.delete("/{essay_id}", response_model=Dict[str, str])
async def delete_essay(essay_id: str, service: EssayService = Depends(get_essay_service)) -> Dict[str, str]:
    """Delete an essay permanently."""
    try:
        deleted = await service.delete_essay(essay_id)
    except StorageError:
        logger.exception("Error deleting essay %s", essay_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to delete essay")
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)
    return {"message": "Essay deleted successfully"}
