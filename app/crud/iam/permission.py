from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session
from app.models.iam import Permission, Role, RolePermission, UserRole
from app.schemas.iam import PermissionCreate, PermissionUpdate
from app.crud.base import CRUDBase

class CRUDPermission(CRUDBase[Permission, PermissionCreate, PermissionUpdate]):
    search_columns = ("name", "slug", "resource", "action")

    def get_page(self, db: Session, *, page: int = 1, limit: int = 10, search: Optional[str] = None, order_by=()):
        return super().get_page(
            db, page=page, limit=limit, search=search,
            order_by=order_by or (Permission.resource.asc(), Permission.action.asc(), Permission.id),
        )

    def get_by_resource(self, db: Session, *, resource: str) -> List[Permission]:
        return (
            self.active_query(db)
            .filter(Permission.resource == resource, Permission.is_active.is_(True))
            .order_by(Permission.action.asc())
            .all()
        )

    def get_for_role(self, db: Session, *, role_id: UUID) -> List[Permission]:
        """Active permissions granted to one role"""
        return (
            self.active_query(db)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .filter(RolePermission.role_id == role_id, Permission.is_active.is_(True))
            .order_by(Permission.resource.asc(), Permission.action.asc())
            .all()
        )

    def _user_permissions_query(self, db: Session, *, user_id: UUID):
        # Every hop must be active and not soft-deleted
        return (
            self.active_query(db)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .join(Role, Role.id == RolePermission.role_id)
            .join(UserRole, UserRole.role_id == Role.id)
            .filter(
                UserRole.user_id == user_id,
                Permission.is_active.is_(True),
                Role.is_active.is_(True),
                Role.deleted_at.is_(None),
            )
        )

    def get_for_user(self, db: Session, *, user_id: UUID) -> List[Permission]:
        return (
            self._user_permissions_query(db, user_id=user_id)
            .distinct()
            .order_by(Permission.resource.asc(), Permission.action.asc())
            .all()
        )

    def user_has_permission(self, db: Session, *, user_id: UUID, resource: str, action: str) -> bool:
        count = (
            self._user_permissions_query(db, user_id=user_id)
            .filter(Permission.resource == resource, Permission.action == action)
            .count()
        )
        return count > 0

    def role_has_permission(self, db: Session, *, role_id: UUID, permission_slug: str) -> bool:
        count = (
            self.active_query(db)
            .join(RolePermission, RolePermission.permission_id == Permission.id)
            .filter(
                RolePermission.role_id == role_id,
                Permission.slug == permission_slug,
                Permission.is_active.is_(True),
            )
            .count()
        )
        return count > 0

permission_crud = CRUDPermission(Permission)
