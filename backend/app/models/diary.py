"""
Diary models for entries and their image attachments.
"""
from sqlalchemy import Column, String, DateTime, Text, ForeignKey, Integer
from sqlalchemy.orm import relationship
from app.db.base import BaseModel


class DiaryEntry(BaseModel):
    """Diary entry with a title, optional description and a date."""
    __tablename__ = "diary_entries"
    
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    date = Column(DateTime, nullable=False, index=True)
    
    # Relationships
    images = relationship(
        "DiaryImage",
        back_populates="entry",
        cascade="all, delete-orphan",
        passive_deletes=True
    )


class DiaryImage(BaseModel):
    """Image attachment row; the bytes live in UPLOAD_DIR as {id}{ext}."""
    __tablename__ = "diary_images"
    
    entry_id = Column(
        Integer,
        ForeignKey("diary_entries.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    
    # Relationships
    entry = relationship("DiaryEntry", back_populates="images")
