from uuid import UUID
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from app.database.session import get_db
from app.schemas.iam import AssignUserRolesRequest, RemoveUserRolesRequest
from app.core.exceptions import RBACError
from app.services.rbac_service import rbac_service
from app.services.menu_tree_service import menu_tree_service
from common_utils.auth.permission_checker import ResourceOwnershipChecker, require_admin
from common_utils.auth.token_validation import get_current_user
from app.utils.response_utils import ResponseWrapper, handle_rbac_error

router = APIRouter(
    prefix="/users",
    tags=["RBAC User Roles"]
)

owner_or_admin = ResourceOwnershipChecker("user_id")


# Registered before the /{user_id} routes so "me" is not parsed as an id
@router.get("/me/accessible-menus")
async def get_my_accessible_menus(
    merge: bool = Query(False, description="Collapse grants per menu, OR-ing the flags"),
    db: Session = Depends(get_db),
    user_data=Depends(get_current_user)
):
    try:
        menus = menu_tree_service.get_user_accessible_menus(db, user_data["user_id"], merge=merge)
        return ResponseWrapper.success(data=menus, message="Accessible menus retrieved successfully")
    except RBACError as e:
        raise handle_rbac_error(e)


@router.get("/{user_id}/roles")
async def get_user_roles(
    user_id: UUID,
    db: Session = Depends(get_db),
    _=Depends(owner_or_admin)
):
    try:
        roles = rbac_service.get_user_roles(db, user_id)
        return ResponseWrapper.success(data=roles, message="User roles retrieved successfully")
    except RBACError as e:
        raise handle_rbac_error(e)


@router.post("/{user_id}/roles")
async def assign_user_roles(
    user_id: UUID,
    payload: AssignUserRolesRequest,
    db: Session = Depends(get_db),
    user_data=Depends(require_admin)
):
    """Replace the role set of a user"""
    try:
        count = rbac_service.assign_roles_to_user(db, user_id, payload.role_ids, actor_id=user_data["user_id"])
        return ResponseWrapper.success(data={"assigned": count}, message="Roles assigned successfully")
    except RBACError as e:
        raise handle_rbac_error(e)


@router.delete("/{user_id}/roles")
async def remove_user_roles(
    user_id: UUID,
    payload: RemoveUserRolesRequest,
    db: Session = Depends(get_db),
    _=Depends(require_admin)
):
    try:
        count = rbac_service.remove_roles_from_user(db, user_id, payload.role_ids)
        return ResponseWrapper.success(data={"removed": count}, message="Roles removed successfully")
    except RBACError as e:
        raise handle_rbac_error(e)


@router.get("/{user_id}/permissions")
async def get_user_permissions(
    user_id: UUID,
    db: Session = Depends(get_db),
    _=Depends(owner_or_admin)
):
    try:
        permissions = rbac_service.get_user_permissions(db, user_id)
        return ResponseWrapper.success(data=permissions, message="User permissions retrieved successfully")
    except RBACError as e:
        raise handle_rbac_error(e)


@router.get("/{user_id}/menus")
async def get_user_menus(
    user_id: UUID,
    merge: bool = Query(False, description="Collapse grants per menu, OR-ing the flags"),
    db: Session = Depends(get_db),
    _=Depends(owner_or_admin)
):
    try:
        menus = menu_tree_service.get_user_menus(db, user_id, merge=merge)
        return ResponseWrapper.success(data=menus, message="User menus retrieved successfully")
    except RBACError as e:
        raise handle_rbac_error(e)


@router.get("/{user_id}/accessible-menus")
async def get_user_accessible_menus(
    user_id: UUID,
    merge: bool = Query(False, description="Collapse grants per menu, OR-ing the flags"),
    db: Session = Depends(get_db),
    _=Depends(owner_or_admin)
):
    try:
        menus = menu_tree_service.get_user_accessible_menus(db, user_id, merge=merge)
        return ResponseWrapper.success(data=menus, message="Accessible menus retrieved successfully")
    except RBACError as e:
        raise handle_rbac_error(e)
