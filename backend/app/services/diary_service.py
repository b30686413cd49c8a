"""
Diary service for diary-related business logic.
"""
import logging
import math
import os
from sqlalchemy.orm import Session
from datetime import date, datetime, time, timedelta
from app.core.utils import to_naive_utc, utcnow
from app.models.diary import DiaryEntry, DiaryImage
from app.schemas.common import PaginatedResponse
from app.schemas.diary import DiaryEntryResponse, EntryWithImages
from app.services.image_service import find_image_path
from typing import List, Optional

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
SORT_ORDERS = ("ASC", "DESC")


def normalize_paging(page: int, page_size: int, sort_order: Optional[str]):
    """Clamp paging arguments to the supported range."""
    if page < 1:
        page = 1

    if page_size < 1 or page_size > MAX_PAGE_SIZE:
        page_size = DEFAULT_PAGE_SIZE

    sort_order = (sort_order or "").upper()
    if sort_order not in SORT_ORDERS:
        sort_order = "DESC"

    return page, page_size, sort_order


def _day_bounds(entry_date: date):
    start = datetime.combine(entry_date, time.min)
    return start, start + timedelta(days=1)


def get_image_ids_for_entry(entry_id: int, db: Session) -> List[int]:
    """Get the ids of all images owned by an entry."""
    rows = db.query(DiaryImage.id).filter(
        DiaryImage.entry_id == entry_id
    ).order_by(DiaryImage.id).all()

    return [row[0] for row in rows]


def _with_images(entry: DiaryEntry, db: Session) -> EntryWithImages:
    return EntryWithImages(
        entry=DiaryEntryResponse.model_validate(entry),
        img_ids=get_image_ids_for_entry(entry.id, db)
    )


def create_entry(
    title: str,
    description: Optional[str] = None,
    entry_date: Optional[datetime] = None,
    db: Session = None
) -> DiaryEntry:
    """Create a new diary entry. The date defaults to now (UTC)."""
    diary_entry = DiaryEntry(
        title=title,
        description=description,
        date=to_naive_utc(entry_date) or utcnow()
    )
    db.add(diary_entry)
    db.commit()
    db.refresh(diary_entry)

    logger.info(f"Created diary entry {diary_entry.id}")
    return diary_entry


def get_entries(
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
    sort_order: str = "DESC",
    filter_date: Optional[date] = None,
    db: Session = None
) -> PaginatedResponse[EntryWithImages]:
    """Get one page of entries, newest first unless sort_order is ASC."""
    page, page_size, sort_order = normalize_paging(page, page_size, sort_order)

    query = db.query(DiaryEntry)
    if filter_date is not None:
        start, end = _day_bounds(filter_date)
        query = query.filter(DiaryEntry.date >= start, DiaryEntry.date < end)

    total = query.count()

    if sort_order == "ASC":
        ordering = (DiaryEntry.date.asc(), DiaryEntry.id.asc())
    else:
        ordering = (DiaryEntry.date.desc(), DiaryEntry.id.desc())

    offset = (page - 1) * page_size
    entries = query.order_by(*ordering).offset(offset).limit(page_size).all()

    return PaginatedResponse[EntryWithImages](
        items=[_with_images(entry, db) for entry in entries],
        total=total,
        page=page,
        page_size=page_size,
        total_pages=math.ceil(total / page_size)
    )


def get_entries_by_date(entry_date: date, db: Session) -> List[EntryWithImages]:
    """Get all entries on a calendar day, ignoring time of day."""
    start, end = _day_bounds(entry_date)
    entries = db.query(DiaryEntry).filter(
        DiaryEntry.date >= start,
        DiaryEntry.date < end
    ).order_by(DiaryEntry.date, DiaryEntry.id).all()

    return [_with_images(entry, db) for entry in entries]


def get_entry_by_id(entry_id: int, db: Session) -> Optional[EntryWithImages]:
    """Get a single entry with its image ids."""
    entry = db.query(DiaryEntry).filter(DiaryEntry.id == entry_id).first()
    if not entry:
        return None

    return _with_images(entry, db)


def update_entry(
    entry_id: int,
    title: Optional[str] = None,
    description: Optional[str] = None,
    entry_date: Optional[datetime] = None,
    db: Session = None
) -> bool:
    """Update the given fields of an entry; None leaves a field unchanged."""
    entry = db.query(DiaryEntry).filter(DiaryEntry.id == entry_id).first()
    if not entry:
        return False

    if title is not None:
        entry.title = title
    if description is not None:
        entry.description = description
    if entry_date is not None:
        entry.date = to_naive_utc(entry_date)

    db.commit()

    logger.info(f"Updated diary entry {entry_id}")
    return True


def delete_entry(entry_id: int, db: Session) -> bool:
    """
    Delete an entry, its image files and (by cascade) its image rows.

    Missing image files are skipped. Returns False if the entry does not exist.
    """
    entry = db.query(DiaryEntry).filter(DiaryEntry.id == entry_id).first()
    if not entry:
        return False

    image_ids = get_image_ids_for_entry(entry_id, db)
    for image_id in image_ids:
        image_path = find_image_path(image_id)
        if image_path and os.path.exists(image_path):
            os.remove(image_path)

    db.delete(entry)
    db.commit()

    logger.info(f"Deleted diary entry {entry_id} with {len(image_ids)} image(s)")
    return True
