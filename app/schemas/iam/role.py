from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
from datetime import datetime
from uuid import UUID
from app.schemas.iam.permission import PermissionResponse
from app.schemas.iam.menu import MenuResponse

class RoleBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    slug: str = Field(..., min_length=1, max_length=100)
    description: str = Field("", max_length=1000)

class RoleCreate(RoleBase):
    # Stored as false unless explicitly true
    is_active: Optional[bool] = None

class RoleUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    slug: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    is_active: Optional[bool] = None

class RoleResponse(RoleBase):
    id: UUID
    description: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime
    permissions: Optional[List[PermissionResponse]] = None
    menus: Optional[List[MenuResponse]] = None

    model_config = ConfigDict(from_attributes=True)
