from pydantic import BaseModel, Field
from uuid import UUID

class CheckPermissionRequest(BaseModel):
    user_id: UUID
    resource: str = Field(..., min_length=1, max_length=100)
    action: str = Field(..., min_length=1, max_length=50)

class CheckPermissionResponse(BaseModel):
    has_permission: bool

class CheckRoleRequest(BaseModel):
    user_id: UUID
    role_slug: str = Field(..., min_length=1, max_length=100)

class CheckRoleResponse(BaseModel):
    has_role: bool
