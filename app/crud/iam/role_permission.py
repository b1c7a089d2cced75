from typing import Optional, Sequence
from uuid import UUID
from sqlalchemy.orm import Session
from app.models.iam import RolePermission
from app.crud.base import utcnow


class CRUDRolePermission:
    def __init__(self, model=RolePermission):
        self.model = model

    def replace_for_role(self, db: Session, *, role_id: UUID, permission_ids: Sequence[UUID], actor_id: Optional[UUID] = None) -> int:
        """
        Delete every grant of the role, then insert the new set.
        Runs inside the caller's transaction.
        """
        db.query(RolePermission).filter(RolePermission.role_id == role_id).delete(synchronize_session=False)
        now = utcnow()
        db.add_all([
            RolePermission(role_id=role_id, permission_id=permission_id, created_by=actor_id, created_at=now)
            for permission_id in permission_ids
        ])
        db.flush()
        return len(permission_ids)

    def remove_for_role(self, db: Session, *, role_id: UUID, permission_ids: Sequence[UUID]) -> int:
        if not permission_ids:
            return 0
        removed = (
            db.query(RolePermission)
            .filter(RolePermission.role_id == role_id, RolePermission.permission_id.in_(list(permission_ids)))
            .delete(synchronize_session=False)
        )
        db.flush()
        return removed

role_permission_crud = CRUDRolePermission()
