from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from app.database.session import get_db
from app.schemas.iam import (
    RoleCreate, RoleUpdate, AssignRolePermissionsRequest, RemoveRolePermissionsRequest,
    AssignRoleMenusRequest, RemoveRoleMenusRequest, MenuGrantUpdate
)
from app.core.exceptions import RBACError
from app.services.rbac_service import rbac_service
from common_utils.auth.permission_checker import require_admin
from app.utils.response_utils import ResponseWrapper, handle_rbac_error
from app.core.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(
    prefix="/roles",
    tags=["RBAC Roles"]
)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_role(
    role: RoleCreate,
    db: Session = Depends(get_db),
    user_data=Depends(require_admin)
):
    """Create a new role"""
    try:
        created = rbac_service.create_role(db, role, actor_id=user_data["user_id"])
        return ResponseWrapper.created(data=created, message=created.message)
    except RBACError as e:
        raise handle_rbac_error(e)


@router.get("")
async def get_roles(
    page: int = Query(1, description="Page number, values below 1 read page 1"),
    limit: int = Query(10, description="Page size, values outside 1..100 fall back to 10"),
    search: Optional[str] = Query(None, description="Substring of name, slug or description"),
    db: Session = Depends(get_db),
    _=Depends(require_admin)
):
    try:
        result = rbac_service.list_roles(db, page=page, limit=limit, search=search)
        return ResponseWrapper.success(data=result, message="Roles retrieved successfully")
    except RBACError as e:
        raise handle_rbac_error(e)


@router.get("/{role_id}")
async def get_role(
    role_id: UUID,
    db: Session = Depends(get_db),
    _=Depends(require_admin)
):
    try:
        role = rbac_service.get_role(db, role_id)
        return ResponseWrapper.success(data=role, message="Role retrieved successfully")
    except RBACError as e:
        raise handle_rbac_error(e)


@router.put("/{role_id}")
async def update_role(
    role_id: UUID,
    role_update: RoleUpdate,
    db: Session = Depends(get_db),
    user_data=Depends(require_admin)
):
    try:
        role = rbac_service.update_role(db, role_id, role_update, actor_id=user_data["user_id"])
        return ResponseWrapper.success(data=role, message="Role updated successfully")
    except RBACError as e:
        raise handle_rbac_error(e)


@router.delete("/{role_id}")
async def delete_role(
    role_id: UUID,
    db: Session = Depends(get_db),
    user_data=Depends(require_admin)
):
    try:
        rbac_service.delete_role(db, role_id, actor_id=user_data["user_id"])
        return ResponseWrapper.deleted(message="Role deleted successfully")
    except RBACError as e:
        raise handle_rbac_error(e)


@router.get("/{role_id}/permissions")
async def get_role_permissions(
    role_id: UUID,
    db: Session = Depends(get_db),
    _=Depends(require_admin)
):
    try:
        role = rbac_service.get_role_with_permissions(db, role_id)
        return ResponseWrapper.success(data=role, message="Role permissions retrieved successfully")
    except RBACError as e:
        raise handle_rbac_error(e)


@router.post("/{role_id}/permissions")
async def assign_role_permissions(
    role_id: UUID,
    payload: AssignRolePermissionsRequest,
    db: Session = Depends(get_db),
    user_data=Depends(require_admin)
):
    """Replace the permission set of a role"""
    try:
        count = rbac_service.assign_permissions_to_role(
            db, role_id, payload.permission_ids, actor_id=user_data["user_id"]
        )
        return ResponseWrapper.success(data={"assigned": count}, message="Permissions assigned successfully")
    except RBACError as e:
        raise handle_rbac_error(e)


@router.delete("/{role_id}/permissions")
async def remove_role_permissions(
    role_id: UUID,
    payload: RemoveRolePermissionsRequest,
    db: Session = Depends(get_db),
    _=Depends(require_admin)
):
    try:
        count = rbac_service.remove_permissions_from_role(db, role_id, payload.permission_ids)
        return ResponseWrapper.success(data={"removed": count}, message="Permissions removed successfully")
    except RBACError as e:
        raise handle_rbac_error(e)


@router.get("/{role_id}/menus")
async def get_role_menus(
    role_id: UUID,
    db: Session = Depends(get_db),
    _=Depends(require_admin)
):
    try:
        grants = rbac_service.get_role_menu_grants(db, role_id)
        return ResponseWrapper.success(data=grants, message="Role menus retrieved successfully")
    except RBACError as e:
        raise handle_rbac_error(e)


@router.post("/{role_id}/menus")
async def assign_role_menus(
    role_id: UUID,
    payload: AssignRoleMenusRequest,
    db: Session = Depends(get_db),
    user_data=Depends(require_admin)
):
    """Replace the menu grants of a role"""
    try:
        count = rbac_service.assign_menus_to_role(
            db, role_id, payload.menu_permissions, actor_id=user_data["user_id"]
        )
        return ResponseWrapper.success(data={"assigned": count}, message="Menus assigned successfully")
    except RBACError as e:
        raise handle_rbac_error(e)


@router.patch("/{role_id}/menus/{menu_id}")
async def update_role_menu_grant(
    role_id: UUID,
    menu_id: UUID,
    flags: MenuGrantUpdate,
    db: Session = Depends(get_db),
    user_data=Depends(require_admin)
):
    try:
        grant = rbac_service.update_menu_grant(db, role_id, menu_id, flags, actor_id=user_data["user_id"])
        return ResponseWrapper.success(data=grant, message="Menu grant updated successfully")
    except RBACError as e:
        raise handle_rbac_error(e)


@router.delete("/{role_id}/menus")
async def remove_role_menus(
    role_id: UUID,
    payload: RemoveRoleMenusRequest,
    db: Session = Depends(get_db),
    _=Depends(require_admin)
):
    try:
        count = rbac_service.remove_menus_from_role(db, role_id, payload.menu_ids)
        return ResponseWrapper.success(data={"removed": count}, message="Menus removed successfully")
    except RBACError as e:
        raise handle_rbac_error(e)


@router.get("/{role_id}/users")
async def get_role_users(
    role_id: UUID,
    page: int = Query(1),
    limit: int = Query(10),
    db: Session = Depends(get_db),
    _=Depends(require_admin)
):
    try:
        result = rbac_service.get_role_users(db, role_id, page=page, limit=limit)
        return ResponseWrapper.success(data=result, message="Role users retrieved successfully")
    except RBACError as e:
        raise handle_rbac_error(e)
