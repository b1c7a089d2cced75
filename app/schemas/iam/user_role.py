from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
from datetime import datetime
from uuid import UUID
from app.schemas.iam.role import RoleResponse

class AssignUserRolesRequest(BaseModel):
    role_ids: List[UUID] = Field(default_factory=list)

class RemoveUserRolesRequest(BaseModel):
    role_ids: List[UUID] = Field(..., min_length=1)

class UserRoleResponse(BaseModel):
    id: UUID
    user_id: UUID
    role_id: UUID
    assigned_at: datetime
    assigned_by: Optional[UUID] = None
    role: Optional[RoleResponse] = None

    model_config = ConfigDict(from_attributes=True)
