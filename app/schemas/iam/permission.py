from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
from datetime import datetime
from uuid import UUID

class PermissionBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    slug: str = Field(..., min_length=1, max_length=100)
    resource: str = Field(..., min_length=1, max_length=100)
    action: str = Field(..., min_length=1, max_length=50)
    description: str = Field("", max_length=1000)

class PermissionCreate(PermissionBase):
    # Stored as false unless explicitly true
    is_active: Optional[bool] = None

class PermissionUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    slug: Optional[str] = Field(None, min_length=1, max_length=100)
    resource: Optional[str] = Field(None, min_length=1, max_length=100)
    action: Optional[str] = Field(None, min_length=1, max_length=50)
    description: Optional[str] = Field(None, max_length=1000)
    is_active: Optional[bool] = None

class PermissionResponse(PermissionBase):
    id: UUID
    description: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

class AssignRolePermissionsRequest(BaseModel):
    permission_ids: List[UUID] = Field(default_factory=list)

class RemoveRolePermissionsRequest(BaseModel):
    permission_ids: List[UUID] = Field(..., min_length=1)
