from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.database.session import get_db
from app.schemas.iam import (
    CheckPermissionRequest, CheckPermissionResponse, CheckRoleRequest, CheckRoleResponse
)
from app.core.exceptions import RBACError
from app.services.rbac_service import rbac_service
from common_utils.auth.token_validation import get_current_user
from app.utils.response_utils import ResponseWrapper, handle_rbac_error

router = APIRouter(
    prefix="/auth",
    tags=["RBAC Authorization"]
)


@router.post("/check-permission")
async def check_permission(
    payload: CheckPermissionRequest,
    db: Session = Depends(get_db),
    _=Depends(get_current_user)
):
    """Does the user hold ``resource``/``action`` through any active role"""
    try:
        allowed = rbac_service.check_user_permission(db, payload.user_id, payload.resource, payload.action)
        return ResponseWrapper.success(
            data=CheckPermissionResponse(has_permission=allowed),
            message="Permission check completed",
        )
    except RBACError as e:
        raise handle_rbac_error(e)


@router.post("/check-role")
async def check_role(
    payload: CheckRoleRequest,
    db: Session = Depends(get_db),
    _=Depends(get_current_user)
):
    try:
        has_role = rbac_service.check_user_role(db, payload.user_id, payload.role_slug)
        return ResponseWrapper.success(
            data=CheckRoleResponse(has_role=has_role),
            message="Role check completed",
        )
    except RBACError as e:
        raise handle_rbac_error(e)
