"""
Image service: image rows in the database, image bytes in UPLOAD_DIR.

A blob is stored as ``{image_id}{ext}``. The extension is not kept in the
row, so lookups probe each allowed extension in order and take the first
file that exists.
"""
import logging
import os
from typing import Optional, Tuple
from sqlalchemy.orm import Session
from app.core.config import settings
from app.models.diary import DiaryEntry, DiaryImage

logger = logging.getLogger(__name__)


class ImageStorageError(Exception):
    """Raised when an image row was created but its bytes could not be written."""


def ensure_upload_dir(upload_dir: Optional[str] = None) -> str:
    """Create the upload directory if it does not exist yet."""
    upload_dir = upload_dir or settings.UPLOAD_DIR
    os.makedirs(upload_dir, exist_ok=True)
    return upload_dir


def get_blob_path(image_id: int, extension: str) -> str:
    """Path of the blob for an image with the given extension."""
    return os.path.join(settings.UPLOAD_DIR, f"{image_id}{extension}")


def find_image_path(image_id: int) -> Optional[str]:
    """Return the first existing blob path for an image, or None."""
    for ext in settings.ALLOWED_IMAGE_EXTENSIONS:
        path = get_blob_path(image_id, ext)
        if os.path.exists(path):
            return path
    return None


def _write_blob(path: str, content: bytes) -> None:
    with open(path, "wb") as buffer:
        buffer.write(content)


def _file_extension(file_name: Optional[str]) -> str:
    """Extension of a file name, treating a bare name like '.png' as its extension."""
    base_name = os.path.basename(file_name or "")
    extension = os.path.splitext(base_name)[1]
    if not extension and base_name.startswith(".") and base_name.count(".") == 1:
        extension = base_name
    return extension


def _validate_upload(content: bytes, file_name: Optional[str]) -> str:
    """Check size and extension; return the normalized extension."""
    if not content:
        raise ValueError("Image file is required")

    if len(content) > settings.MAX_UPLOAD_SIZE:
        max_mb = settings.MAX_UPLOAD_SIZE // (1024 * 1024)
        raise ValueError(f"File size exceeds maximum allowed size of {max_mb} MB")

    file_ext = _file_extension(file_name).lower()
    if file_ext not in settings.ALLOWED_IMAGE_EXTENSIONS:
        allowed = ", ".join(settings.ALLOWED_IMAGE_EXTENSIONS)
        raise ValueError(f"File type '{file_ext}' is not allowed. Allowed types: {allowed}")

    return file_ext


def _discard_image_row(image_id: int, db: Session) -> None:
    """Compensating delete after a failed blob write. Never raises."""
    try:
        db.query(DiaryImage).filter(DiaryImage.id == image_id).delete()
        db.commit()
    except Exception:
        db.rollback()
        logger.error(f"Could not remove image row {image_id} after failed upload", exc_info=True)


def upload_image(
    entry_id: int,
    content: bytes,
    file_name: Optional[str],
    db: Session
) -> DiaryImage:
    """
    Store an image for an entry.

    Raises ValueError for an empty, oversized or disallowed file and for an
    unknown entry; nothing is written in those cases. Raises
    ImageStorageError if the file cannot be saved, after removing the row
    that was created for it.
    """
    try:
        file_ext = _validate_upload(content, file_name)
    except ValueError as e:
        logger.warning(f"Rejected upload '{file_name}' for entry {entry_id}: {e}")
        raise

    entry_exists = db.query(DiaryEntry.id).filter(DiaryEntry.id == entry_id).first()
    if entry_exists is None:
        logger.warning(f"Rejected upload for missing entry {entry_id}")
        raise ValueError(f"Diary entry with ID {entry_id} not found")

    image = DiaryImage(entry_id=entry_id)
    db.add(image)
    db.commit()
    db.refresh(image)
    image_id = image.id

    try:
        ensure_upload_dir()
        _write_blob(get_blob_path(image_id, file_ext), content)
    except Exception as e:
        logger.error(f"Failed to save image file for image {image_id}: {e}", exc_info=True)
        _discard_image_row(image_id, db)
        raise ImageStorageError("Failed to save image file") from e

    logger.info(f"Stored image {image_id} ({len(content)} bytes) for entry {entry_id}")
    return image


def get_image_file(image_id: int, db: Session) -> Optional[Tuple[bytes, str]]:
    """Return the bytes of an image and the path they were read from, or None."""
    image = db.query(DiaryImage).filter(DiaryImage.id == image_id).first()
    if not image:
        return None

    image_path = find_image_path(image_id)
    if image_path is None:
        logger.warning(f"Image {image_id} has a row but no file in {settings.UPLOAD_DIR}")
        return None

    with open(image_path, "rb") as f:
        return f.read(), image_path


def get_image(image_id: int, db: Session) -> Optional[bytes]:
    """Return the bytes of an image, or None if the row or its file is missing."""
    image_file = get_image_file(image_id, db)
    if image_file is None:
        return None
    return image_file[0]


def delete_image(image_id: int, db: Session) -> bool:
    """Delete an image file and its row. False if the row does not exist."""
    image = db.query(DiaryImage).filter(DiaryImage.id == image_id).first()
    if not image:
        return False

    image_path = find_image_path(image_id)
    if image_path:
        os.remove(image_path)

    db.delete(image)
    db.commit()

    logger.info(f"Deleted image {image_id}")
    return True
