"""
Pydantic schemas for Diary entities.
"""
from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import datetime


class DiaryEntryResponse(BaseModel):
    """Schema for diary entry response."""
    id: int
    title: str
    description: Optional[str] = None
    date: datetime
    
    class Config:
        from_attributes = True


class EntryWithImages(BaseModel):
    """An entry together with the ids of the images it owns."""
    entry: DiaryEntryResponse
    img_ids: List[int] = []
    
    class Config:
        alias_generator = to_camel
        populate_by_name = True


class DiaryEntryCreate(BaseModel):
    """Schema for diary entry creation."""
    title: Optional[str] = None
    description: Optional[str] = None
    date: Optional[datetime] = None


class DiaryEntryUpdate(BaseModel):
    """Schema for diary entry update. Omitted fields keep their stored value."""
    title: Optional[str] = None
    description: Optional[str] = None
    date: Optional[datetime] = None


class DiaryImageResponse(BaseModel):
    """Schema for uploaded image response."""
    id: int
    entry_id: int
    
    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True
