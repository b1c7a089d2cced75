from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from app.database.session import get_db
from app.schemas.iam import PermissionCreate, PermissionUpdate
from app.core.exceptions import RBACError
from app.services.rbac_service import rbac_service
from common_utils.auth.permission_checker import require_admin
from app.utils.response_utils import ResponseWrapper, handle_rbac_error
from app.core.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(
    prefix="/permissions",
    tags=["RBAC Permissions"]
)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_permission(
    permission: PermissionCreate,
    db: Session = Depends(get_db),
    user_data=Depends(require_admin)
):
    """Create a new permission"""
    try:
        created = rbac_service.create_permission(db, permission, actor_id=user_data["user_id"])
        return ResponseWrapper.created(data=created, message=created.message)
    except RBACError as e:
        raise handle_rbac_error(e)


@router.get("")
async def get_permissions(
    page: int = Query(1),
    limit: int = Query(10),
    search: Optional[str] = Query(None, description="Substring of name, slug, resource or action"),
    db: Session = Depends(get_db),
    _=Depends(require_admin)
):
    try:
        result = rbac_service.list_permissions(db, page=page, limit=limit, search=search)
        logger.info(f"Fetched {len(result.items)} permissions (total={result.meta.total_items})")
        return ResponseWrapper.success(data=result, message="Permissions fetched successfully")
    except RBACError as e:
        raise handle_rbac_error(e)


@router.get("/resource/{resource}")
async def get_permissions_by_resource(
    resource: str,
    db: Session = Depends(get_db),
    _=Depends(require_admin)
):
    try:
        permissions = rbac_service.get_permissions_by_resource(db, resource)
        return ResponseWrapper.success(data=permissions, message="Permissions fetched successfully")
    except RBACError as e:
        raise handle_rbac_error(e)


@router.get("/{permission_id}")
async def get_permission(
    permission_id: UUID,
    db: Session = Depends(get_db),
    _=Depends(require_admin)
):
    try:
        permission = rbac_service.get_permission(db, permission_id)
        return ResponseWrapper.success(data=permission, message="Permission fetched successfully")
    except RBACError as e:
        raise handle_rbac_error(e)


@router.put("/{permission_id}")
async def update_permission(
    permission_id: UUID,
    permission_update: PermissionUpdate,
    db: Session = Depends(get_db),
    user_data=Depends(require_admin)
):
    try:
        permission = rbac_service.update_permission(
            db, permission_id, permission_update, actor_id=user_data["user_id"]
        )
        return ResponseWrapper.success(data=permission, message="Permission updated successfully")
    except RBACError as e:
        raise handle_rbac_error(e)


@router.delete("/{permission_id}")
async def delete_permission(
    permission_id: UUID,
    db: Session = Depends(get_db),
    user_data=Depends(require_admin)
):
    try:
        rbac_service.delete_permission(db, permission_id, actor_id=user_data["user_id"])
        return ResponseWrapper.deleted(message="Permission deleted successfully")
    except RBACError as e:
        raise handle_rbac_error(e)
