from pydantic import BaseModel, Field
from typing import Generic, List, TypeVar
from uuid import UUID

ItemType = TypeVar("ItemType")

class RBACMetadata(BaseModel):
    page: int
    limit: int
    total_pages: int
    total_items: int

class PageResponse(BaseModel, Generic[ItemType]):
    items: List[ItemType] = Field(default_factory=list)
    meta: RBACMetadata

class CreatedResponse(BaseModel):
    id: UUID
    message: str
