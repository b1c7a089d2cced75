"""
Menu tree resolution: the navigation hierarchy and the menus a user can
reach through the roles they hold.
"""
from typing import Dict, List, Union
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.logging_config import get_logger
from app.crud.iam import menu_crud, role_menu_crud
from app.models.iam import Menu
from app.schemas.iam import MenuResponse, RoleMenuResponse, UserMenuResponse
from app.services.rbac_service import menu_to_response, role_menu_to_response, storage_errors

logger = get_logger(__name__)

GRANT_FLAGS = ("can_view", "can_create", "can_edit", "can_delete")


class MenuTreeService:

    def get_menu_tree(self, db: Session) -> List[MenuResponse]:
        """Active root menus, each with one level of active children"""
        with storage_errors("get menu tree"):
            roots = menu_crud.get_roots(db)
            children = menu_crud.get_children_by_parent(db, parent_ids=[root.id for root in roots])
        return [menu_to_response(root, children.get(root.id, [])) for root in roots]

    def get_user_menus(self, db: Session, user_id: UUID, merge: bool = False) -> Union[List[RoleMenuResponse], List[UserMenuResponse]]:
        """
        Menu grants reachable through the user's active roles.

        By default every grant row is returned, so a menu granted by two
        roles appears twice. With ``merge`` the rows collapse to one entry
        per menu whose flags are the OR of every grant.
        """
        with storage_errors("get user menus"):
            rows = role_menu_crud.get_for_user(db, user_id=user_id)
        return self._shape_grants(rows, {}, merge)

    def get_user_accessible_menus(self, db: Session, user_id: UUID, merge: bool = False) -> Union[List[RoleMenuResponse], List[UserMenuResponse]]:
        """
        Grants the user can view, each menu carrying its active children.

        Same rows as ``get_user_menus`` restricted to ``can_view``; the
        other flags are kept so callers can decide which actions to offer.
        """
        with storage_errors("get user accessible menus"):
            rows = role_menu_crud.get_for_user(db, user_id=user_id, viewable_only=True)
            parent_ids = list(dict.fromkeys(menu.id for _, menu in rows))
            children = menu_crud.get_children_by_parent(db, parent_ids=parent_ids)
        logger.debug(f"Accessible menus resolved: user={user_id} grants={len(rows)} menus={len(parent_ids)}")
        return self._shape_grants(rows, children, merge)

    @staticmethod
    def _shape_grants(rows, children: Dict[UUID, List[Menu]], merge: bool) -> Union[List[RoleMenuResponse], List[UserMenuResponse]]:
        if not merge:
            return [role_menu_to_response(grant, menu, children.get(menu.id, [])) for grant, menu in rows]

        merged: Dict[UUID, UserMenuResponse] = {}
        for grant, menu in rows:
            entry = merged.get(menu.id)
            if entry is None:
                merged[menu.id] = UserMenuResponse(
                    menu_id=menu.id,
                    menu=menu_to_response(menu, children.get(menu.id, [])),
                    **{flag: getattr(grant, flag) for flag in GRANT_FLAGS},
                )
                continue
            for flag in GRANT_FLAGS:
                if getattr(grant, flag):
                    setattr(entry, flag, True)
        return list(merged.values())


menu_tree_service = MenuTreeService()
