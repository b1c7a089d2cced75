from typing import List, Optional, Sequence, Tuple
from uuid import UUID
from sqlalchemy.orm import Session
from app.models.iam import Role, UserRole
from app.crud.base import utcnow


class CRUDUserRole:
    def __init__(self, model=UserRole):
        self.model = model

    def get_for_user(self, db: Session, *, user_id: UUID) -> List[Tuple[UserRole, Role]]:
        """Assignments of a user paired with their (not deleted) role"""
        return (
            db.query(UserRole, Role)
            .join(Role, Role.id == UserRole.role_id)
            .filter(UserRole.user_id == user_id, Role.deleted_at.is_(None))
            .order_by(UserRole.assigned_at.asc(), Role.name.asc())
            .all()
        )

    def get_page_for_role(self, db: Session, *, role_id: UUID, page: int = 1, limit: int = 10) -> Tuple[List[UserRole], int]:
        query = db.query(UserRole).filter(UserRole.role_id == role_id)
        total = query.count()
        items = (
            query.order_by(UserRole.assigned_at.desc(), UserRole.id)
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return items, total

    def replace_for_user(self, db: Session, *, user_id: UUID, role_ids: Sequence[UUID], actor_id: Optional[UUID] = None) -> int:
        """
        Delete every role of the user, then insert the new set.
        Runs inside the caller's transaction.
        """
        db.query(UserRole).filter(UserRole.user_id == user_id).delete(synchronize_session=False)
        now = utcnow()
        db.add_all([
            UserRole(user_id=user_id, role_id=role_id, assigned_by=actor_id, assigned_at=now)
            for role_id in role_ids
        ])
        db.flush()
        return len(role_ids)

    def remove_for_user(self, db: Session, *, user_id: UUID, role_ids: Sequence[UUID]) -> int:
        """Targeted delete: only the listed roles are revoked"""
        if not role_ids:
            return 0
        removed = (
            db.query(UserRole)
            .filter(UserRole.user_id == user_id, UserRole.role_id.in_(list(role_ids)))
            .delete(synchronize_session=False)
        )
        db.flush()
        return removed

user_role_crud = CRUDUserRole()
