from .utils import create_access_token, verify_token
from .token_validation import get_current_user
from .permission_checker import (
    PermissionChecker,
    RoleChecker,
    ResourceOwnershipChecker,
    require_admin,
    require_super_admin,
)
