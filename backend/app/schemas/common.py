"""
Response envelopes shared by all routes.
"""
from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from typing import Generic, List, Optional, TypeVar

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Envelope wrapping every JSON response."""
    success: bool
    message: str = ""
    data: Optional[T] = None


class PaginatedResponse(BaseModel, Generic[T]):
    """One page of results plus the totals needed to page through the rest."""
    items: List[T] = []
    total: int
    page: int
    page_size: int
    total_pages: int
    
    class Config:
        alias_generator = to_camel
        populate_by_name = True
