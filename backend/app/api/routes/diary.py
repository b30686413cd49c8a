"""
Diary routes for entries and their images.
"""
import mimetypes
from fastapi import APIRouter, Depends, HTTPException, Query, Response, status, UploadFile, File
from sqlalchemy.orm import Session
from typing import List, Optional
from app.core.config import settings
from app.core.utils import format_response, parse_date
from app.db.session import get_db
from app.schemas.common import ApiResponse, PaginatedResponse
from app.schemas.diary import (
    DiaryEntryCreate, DiaryEntryUpdate, DiaryEntryResponse,
    DiaryImageResponse, EntryWithImages
)
from app.services import diary_service, image_service
from app.services.image_service import ImageStorageError

router = APIRouter(prefix="/diary", tags=["diary"])


def _require_title(title: Optional[str]) -> None:
    if title is None or not title.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Title is required"
        )


@router.post("/entries", response_model=ApiResponse[DiaryEntryResponse], status_code=status.HTTP_201_CREATED)
async def create_entry(
    entry_data: DiaryEntryCreate,
    db: Session = Depends(get_db)
):
    """Create a new diary entry."""
    _require_title(entry_data.title)

    entry = diary_service.create_entry(
        title=entry_data.title,
        description=entry_data.description,
        entry_date=entry_data.date,
        db=db
    )

    return format_response(
        DiaryEntryResponse.model_validate(entry),
        "Entry created successfully"
    )


@router.get("/entries", response_model=ApiResponse[PaginatedResponse[EntryWithImages]])
async def get_entries(
    page: int = 1,
    page_size: int = Query(10, alias="pageSize"),
    sort_by: str = Query("DESC", alias="sortBy"),
    filter_date: Optional[str] = Query(None, alias="filterDate"),
    db: Session = Depends(get_db)
):
    """Get entries with pagination, date filtering and sorting (ASC or DESC)."""
    result = diary_service.get_entries(
        page=page,
        page_size=page_size,
        sort_order=sort_by,
        filter_date=parse_date(filter_date),
        db=db
    )

    return format_response(result, "Entries retrieved successfully")


@router.get("/entries/by-date/{date}", response_model=ApiResponse[List[EntryWithImages]])
async def get_entries_by_date(
    date: str,
    db: Session = Depends(get_db)
):
    """Get all entries for a date (yyyy-MM-dd)."""
    entry_date = parse_date(date)
    if entry_date is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid date format. Use yyyy-MM-dd"
        )

    entries = diary_service.get_entries_by_date(entry_date, db)

    return format_response(
        entries,
        f"Entries for {entry_date.isoformat()} retrieved successfully"
    )


@router.get("/entries/{entry_id}", response_model=ApiResponse[EntryWithImages])
async def get_entry(
    entry_id: int,
    db: Session = Depends(get_db)
):
    """Get a specific entry with its image ids."""
    entry = diary_service.get_entry_by_id(entry_id, db)

    if not entry:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Entry with ID {entry_id} not found"
        )

    return format_response(entry, "Entry retrieved successfully")


@router.put("/entries/{entry_id}", response_model=ApiResponse[bool])
async def update_entry(
    entry_id: int,
    entry_data: DiaryEntryUpdate,
    db: Session = Depends(get_db)
):
    """Update entry title, description or date. Omitted fields are kept."""
    if entry_data.title is not None:
        _require_title(entry_data.title)

    updated = diary_service.update_entry(
        entry_id,
        title=entry_data.title,
        description=entry_data.description,
        entry_date=entry_data.date,
        db=db
    )

    if not updated:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Entry with ID {entry_id} not found"
        )

    return format_response(True, "Entry updated successfully")


@router.delete("/entries/{entry_id}", response_model=ApiResponse[bool])
async def delete_entry(
    entry_id: int,
    db: Session = Depends(get_db)
):
    """Delete an entry and all of its images."""
    deleted = diary_service.delete_entry(entry_id, db)

    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Entry with ID {entry_id} not found"
        )

    return format_response(True, "Entry deleted successfully")


@router.post("/entries/{entry_id}/images", response_model=ApiResponse[DiaryImageResponse], status_code=status.HTTP_201_CREATED)
async def upload_image(
    entry_id: int,
    image: UploadFile = File(...),
    db: Session = Depends(get_db)
):
    """Upload an image (jpg, jpeg, png, gif, webp; max 10MB) to an entry."""
    # One byte past the limit is enough to reject an oversized file
    content = await image.read(settings.MAX_UPLOAD_SIZE + 1)

    try:
        stored = image_service.upload_image(entry_id, content, image.filename, db)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except ImageStorageError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error"
        )

    return format_response(
        DiaryImageResponse.model_validate(stored),
        "Image uploaded successfully"
    )


@router.get("/images/{image_id}")
async def get_image(
    image_id: int,
    db: Session = Depends(get_db)
):
    """Get the raw bytes of an image."""
    image_file = image_service.get_image_file(image_id, db)

    if image_file is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Image with ID {image_id} not found"
        )

    content, image_path = image_file
    media_type = mimetypes.guess_type(image_path)[0] or "application/octet-stream"

    return Response(content=content, media_type=media_type)


@router.delete("/images/{image_id}", response_model=ApiResponse[bool])
async def delete_image(
    image_id: int,
    db: Session = Depends(get_db)
):
    """Delete an image."""
    deleted = image_service.delete_image(image_id, db)

    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Image with ID {image_id} not found"
        )

    return format_response(True, "Image deleted successfully")
