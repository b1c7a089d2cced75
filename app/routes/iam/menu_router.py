from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from app.database.session import get_db
from app.schemas.iam import MenuCreate, MenuUpdate
from app.core.exceptions import RBACError
from app.services.rbac_service import rbac_service
from app.services.menu_tree_service import menu_tree_service
from common_utils.auth.permission_checker import require_admin
from app.utils.response_utils import ResponseWrapper, handle_rbac_error

router = APIRouter(
    prefix="/menus",
    tags=["RBAC Menus"]
)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_menu(
    menu: MenuCreate,
    db: Session = Depends(get_db),
    user_data=Depends(require_admin)
):
    """Create a new menu, optionally under an existing parent"""
    try:
        created = rbac_service.create_menu(db, menu, actor_id=user_data["user_id"])
        return ResponseWrapper.created(data=created, message=created.message)
    except RBACError as e:
        raise handle_rbac_error(e)


@router.get("")
async def get_menus(
    page: int = Query(1),
    limit: int = Query(10),
    search: Optional[str] = Query(None, description="Substring of name, slug or url"),
    db: Session = Depends(get_db),
    _=Depends(require_admin)
):
    try:
        result = rbac_service.list_menus(db, page=page, limit=limit, search=search)
        return ResponseWrapper.success(data=result, message="Menus retrieved successfully")
    except RBACError as e:
        raise handle_rbac_error(e)


# Registered before /{menu_id} so "tree" is not parsed as an id
@router.get("/tree")
async def get_menu_tree(
    db: Session = Depends(get_db),
    _=Depends(require_admin)
):
    try:
        tree = menu_tree_service.get_menu_tree(db)
        return ResponseWrapper.success(data=tree, message="Menu tree retrieved successfully")
    except RBACError as e:
        raise handle_rbac_error(e)


@router.get("/{menu_id}")
async def get_menu(
    menu_id: UUID,
    db: Session = Depends(get_db),
    _=Depends(require_admin)
):
    try:
        menu = rbac_service.get_menu(db, menu_id)
        return ResponseWrapper.success(data=menu, message="Menu retrieved successfully")
    except RBACError as e:
        raise handle_rbac_error(e)


@router.put("/{menu_id}")
async def update_menu(
    menu_id: UUID,
    menu_update: MenuUpdate,
    db: Session = Depends(get_db),
    user_data=Depends(require_admin)
):
    try:
        menu = rbac_service.update_menu(db, menu_id, menu_update, actor_id=user_data["user_id"])
        return ResponseWrapper.success(data=menu, message="Menu updated successfully")
    except RBACError as e:
        raise handle_rbac_error(e)


@router.delete("/{menu_id}")
async def delete_menu(
    menu_id: UUID,
    db: Session = Depends(get_db),
    user_data=Depends(require_admin)
):
    try:
        rbac_service.delete_menu(db, menu_id, actor_id=user_data["user_id"])
        return ResponseWrapper.deleted(message="Menu deleted successfully")
    except RBACError as e:
        raise handle_rbac_error(e)
