"""Models package - Import all models for SQLAlchemy registration."""
from app.models.diary import DiaryEntry, DiaryImage

__all__ = [
    "DiaryEntry",
    "DiaryImage",
]
