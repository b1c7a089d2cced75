import logging
from typing import Dict, List, Sequence, Tuple

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from app.config import settings
from app.core.exceptions import RBACError
from app.database.session import get_db
from app.services.rbac_service import rbac_service
from app.utils.response_utils import ResponseWrapper, handle_rbac_error

from .token_validation import get_current_user

logger = logging.getLogger("uvicorn")


def _forbidden(message: str, error_code: str, details: Dict) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail=ResponseWrapper.error(message=message, error_code=error_code, details=details),
    )


class PermissionChecker:
    """
    Dependency that passes when the caller holds ANY of the listed
    ``(resource, action)`` permissions.
    """

    def __init__(self, required_permissions: Sequence[Tuple[str, str]]):
        self.required_permissions = list(required_permissions)

    async def __call__(self, user_data: Dict = Depends(get_current_user), db: Session = Depends(get_db)) -> Dict:
        user_id = user_data["user_id"]
        logger.info(f"PermissionChecker triggered for required_permissions: {self.required_permissions}")

        try:
            for resource, action in self.required_permissions:
                if rbac_service.check_user_permission(db, user_id, resource, action):
                    return user_data
        except RBACError as e:
            raise handle_rbac_error(e)

        logger.warning(f"Permission denied. user={user_id} required={self.required_permissions}")
        raise _forbidden(
            "Insufficient permissions",
            "INSUFFICIENT_PERMISSIONS",
            {"required_permissions": [f"{r}.{a}" for r, a in self.required_permissions]},
        )


class RoleChecker:
    """Dependency that passes when the caller holds ANY of the listed role slugs"""

    def __init__(self, allowed_roles: Sequence[str]):
        self.allowed_roles = list(allowed_roles)

    async def __call__(self, user_data: Dict = Depends(get_current_user), db: Session = Depends(get_db)) -> Dict:
        user_id = user_data["user_id"]

        try:
            for slug in self.allowed_roles:
                if rbac_service.check_user_role(db, user_id, slug):
                    return user_data
        except RBACError as e:
            raise handle_rbac_error(e)

        logger.warning(f"Role denied. user={user_id} allowed={self.allowed_roles}")
        raise _forbidden(
            "Insufficient role",
            "INSUFFICIENT_ROLE",
            {"allowed_roles": self.allowed_roles},
        )


require_super_admin = RoleChecker([settings.SUPER_ADMIN_ROLE_SLUG])
require_admin = RoleChecker([settings.SUPER_ADMIN_ROLE_SLUG, settings.ADMIN_ROLE_SLUG])


class ResourceOwnershipChecker:
    """
    Lets a user act on their own ``{user_id}`` path resource; anyone else
    must hold one of the admin roles.
    """

    def __init__(self, path_param: str = "user_id", admin_roles: List[str] = None):
        self.path_param = path_param
        self.admin_roles = admin_roles or [settings.SUPER_ADMIN_ROLE_SLUG, settings.ADMIN_ROLE_SLUG]

    async def __call__(self, request: Request, user_data: Dict = Depends(get_current_user), db: Session = Depends(get_db)) -> Dict:
        owner_id = request.path_params.get(self.path_param)
        if owner_id is not None and str(owner_id) == str(user_data["user_id"]):
            return user_data

        try:
            for slug in self.admin_roles:
                if rbac_service.check_user_role(db, user_data["user_id"], slug):
                    return user_data
        except RBACError as e:
            raise handle_rbac_error(e)

        raise _forbidden(
            "You can only access your own resources",
            "RESOURCE_OWNERSHIP_REQUIRED",
            {self.path_param: owner_id},
        )
