from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
from datetime import datetime
from uuid import UUID

class MenuBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    slug: str = Field(..., min_length=1, max_length=100)
    url: str = Field("", max_length=255)
    icon: str = Field("", max_length=100)

class MenuCreate(MenuBase):
    parent_id: Optional[UUID] = None
    sort_order: Optional[int] = None
    is_active: Optional[bool] = None

class MenuUpdate(BaseModel):
    """
    Partial update. Omitted fields keep their value; ``parent_id`` may be
    sent as null to move the menu back to the root level.
    """
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    slug: Optional[str] = Field(None, min_length=1, max_length=100)
    url: Optional[str] = Field(None, max_length=255)
    icon: Optional[str] = Field(None, max_length=100)
    parent_id: Optional[UUID] = None
    sort_order: Optional[int] = None
    is_active: Optional[bool] = None

class MenuResponse(MenuBase):
    id: UUID
    url: Optional[str] = None
    icon: Optional[str] = None
    parent_id: Optional[UUID] = None
    sort_order: int
    is_active: bool
    created_at: datetime
    updated_at: datetime
    children: List["MenuResponse"] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)

MenuResponse.model_rebuild()

class MenuGrant(BaseModel):
    menu_id: UUID
    can_view: bool = False
    can_create: bool = False
    can_edit: bool = False
    can_delete: bool = False

class MenuGrantUpdate(BaseModel):
    can_view: bool
    can_create: bool
    can_edit: bool
    can_delete: bool

class AssignRoleMenusRequest(BaseModel):
    menu_permissions: List[MenuGrant] = Field(default_factory=list)

class RemoveRoleMenusRequest(BaseModel):
    menu_ids: List[UUID] = Field(..., min_length=1)

class RoleMenuResponse(BaseModel):
    id: UUID
    role_id: UUID
    menu_id: UUID
    can_view: bool
    can_create: bool
    can_edit: bool
    can_delete: bool
    menu: MenuResponse
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

class UserMenuResponse(BaseModel):
    """A menu merged across every role the user holds: flags are OR-ed."""
    menu_id: UUID
    can_view: bool
    can_create: bool
    can_edit: bool
    can_delete: bool
    menu: MenuResponse
