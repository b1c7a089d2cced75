import uuid

from sqlalchemy import Column, DateTime, ForeignKey, UniqueConstraint, Uuid, func
from app.database.session import Base


class UserRole(Base):
    __tablename__ = "user_roles"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    # Users live in the user-management service; only the id is stored here
    user_id = Column(Uuid, nullable=False, index=True)
    role_id = Column(Uuid, ForeignKey("roles.id", ondelete="CASCADE"), nullable=False, index=True)
    assigned_at = Column(DateTime, default=func.now(), nullable=False)
    assigned_by = Column(Uuid, nullable=True)

    __table_args__ = (UniqueConstraint("user_id", "role_id", name="unique_user_role"),)
