import uuid

from sqlalchemy import Column, DateTime, ForeignKey, UniqueConstraint, Uuid, func
from app.database.session import Base


class RolePermission(Base):
    __tablename__ = "role_permissions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    role_id = Column(Uuid, ForeignKey("roles.id", ondelete="CASCADE"), nullable=False, index=True)
    permission_id = Column(Uuid, ForeignKey("permissions.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)
    created_by = Column(Uuid, nullable=True)

    __table_args__ = (UniqueConstraint("role_id", "permission_id", name="unique_role_permission"),)
