from app.schemas.iam.common import RBACMetadata, PageResponse, CreatedResponse
from app.schemas.iam.permission import (
    PermissionBase, PermissionCreate, PermissionUpdate, PermissionResponse,
    AssignRolePermissionsRequest, RemoveRolePermissionsRequest
)
from app.schemas.iam.menu import (
    MenuBase, MenuCreate, MenuUpdate, MenuResponse, MenuGrant, MenuGrantUpdate,
    AssignRoleMenusRequest, RemoveRoleMenusRequest, RoleMenuResponse, UserMenuResponse
)
from app.schemas.iam.role import (
    RoleBase, RoleCreate, RoleUpdate, RoleResponse
)
from app.schemas.iam.user_role import (
    AssignUserRolesRequest, RemoveUserRolesRequest, UserRoleResponse
)
from app.schemas.iam.authorization import (
    CheckPermissionRequest, CheckPermissionResponse, CheckRoleRequest, CheckRoleResponse
)
