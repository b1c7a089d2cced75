from typing import Optional
from uuid import UUID
from sqlalchemy.orm import Session
from app.models.iam import Role, UserRole
from app.schemas.iam import RoleCreate, RoleUpdate
from app.crud.base import CRUDBase

class CRUDRole(CRUDBase[Role, RoleCreate, RoleUpdate]):
    search_columns = ("name", "slug", "description")

    def get_page(self, db: Session, *, page: int = 1, limit: int = 10, search: Optional[str] = None, order_by=()):
        return super().get_page(
            db, page=page, limit=limit, search=search,
            order_by=order_by or (Role.created_at.desc(), Role.id),
        )

    def user_has_role(self, db: Session, *, user_id: UUID, role_slug: str) -> bool:
        count = (
            self.active_query(db)
            .join(UserRole, UserRole.role_id == Role.id)
            .filter(
                UserRole.user_id == user_id,
                Role.slug == role_slug,
                Role.is_active.is_(True),
            )
            .count()
        )
        return count > 0

role_crud = CRUDRole(Role)
