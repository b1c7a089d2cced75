from typing import List, Optional, Sequence, Tuple
from uuid import UUID
from sqlalchemy.orm import Session
from app.models.iam import Menu, Role, RoleMenu, UserRole
from app.schemas.iam import MenuGrant, MenuGrantUpdate
from app.crud.base import utcnow
from app.crud.iam.menu import menu_crud


class CRUDRoleMenu:
    def __init__(self, model=RoleMenu):
        self.model = model

    def get(self, db: Session, *, role_id: UUID, menu_id: UUID) -> Optional[RoleMenu]:
        return (
            db.query(RoleMenu)
            .filter(RoleMenu.role_id == role_id, RoleMenu.menu_id == menu_id)
            .first()
        )

    def get_for_role(self, db: Session, *, role_id: UUID) -> List[Tuple[RoleMenu, Menu]]:
        return (
            db.query(RoleMenu, Menu)
            .join(Menu, Menu.id == RoleMenu.menu_id)
            .filter(RoleMenu.role_id == role_id, Menu.deleted_at.is_(None), Menu.is_active.is_(True))
            .order_by(*menu_crud.ordering)
            .all()
        )

    def get_for_user(self, db: Session, *, user_id: UUID, viewable_only: bool = False) -> List[Tuple[RoleMenu, Menu]]:
        """
        Raw grant rows reachable through the user's active roles. A menu
        granted by several roles appears once per role.
        """
        query = (
            db.query(RoleMenu, Menu)
            .join(Menu, Menu.id == RoleMenu.menu_id)
            .join(Role, Role.id == RoleMenu.role_id)
            .join(UserRole, UserRole.role_id == Role.id)
            .filter(
                UserRole.user_id == user_id,
                Role.deleted_at.is_(None),
                Role.is_active.is_(True),
                Menu.deleted_at.is_(None),
                Menu.is_active.is_(True),
            )
        )
        if viewable_only:
            query = query.filter(RoleMenu.can_view.is_(True))
        return query.order_by(*menu_crud.ordering, RoleMenu.id).all()

    def replace_for_role(self, db: Session, *, role_id: UUID, grants: Sequence[MenuGrant], actor_id: Optional[UUID] = None) -> int:
        """
        Delete every menu grant of the role, then insert the new set.
        Runs inside the caller's transaction.
        """
        db.query(RoleMenu).filter(RoleMenu.role_id == role_id).delete(synchronize_session=False)
        now = utcnow()
        db.add_all([
            RoleMenu(
                role_id=role_id,
                menu_id=grant.menu_id,
                can_view=grant.can_view,
                can_create=grant.can_create,
                can_edit=grant.can_edit,
                can_delete=grant.can_delete,
                created_by=actor_id,
                updated_by=actor_id,
                created_at=now,
                updated_at=now,
            )
            for grant in grants
        ])
        db.flush()
        return len(grants)

    def update_flags(self, db: Session, *, db_obj: RoleMenu, flags: MenuGrantUpdate, actor_id: Optional[UUID] = None) -> RoleMenu:
        for field, value in flags.model_dump().items():
            setattr(db_obj, field, value)
        db_obj.updated_by = actor_id
        db_obj.updated_at = utcnow()
        db.add(db_obj)
        db.flush()
        return db_obj

    def remove_for_role(self, db: Session, *, role_id: UUID, menu_ids: Sequence[UUID]) -> int:
        if not menu_ids:
            return 0
        removed = (
            db.query(RoleMenu)
            .filter(RoleMenu.role_id == role_id, RoleMenu.menu_id.in_(list(menu_ids)))
            .delete(synchronize_session=False)
        )
        db.flush()
        return removed

role_menu_crud = CRUDRoleMenu()
