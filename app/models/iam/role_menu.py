import uuid

from sqlalchemy import Column, Boolean, DateTime, ForeignKey, UniqueConstraint, Uuid, func
from app.database.session import Base


class RoleMenu(Base):
    __tablename__ = "role_menus"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    role_id = Column(Uuid, ForeignKey("roles.id", ondelete="CASCADE"), nullable=False, index=True)
    menu_id = Column(Uuid, ForeignKey("menus.id", ondelete="CASCADE"), nullable=False, index=True)
    can_view = Column(Boolean, default=True, nullable=False)
    can_create = Column(Boolean, default=False, nullable=False)
    can_edit = Column(Boolean, default=False, nullable=False)
    can_delete = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=func.now(), nullable=False)
    created_by = Column(Uuid, nullable=True)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)
    updated_by = Column(Uuid, nullable=True)

    __table_args__ = (UniqueConstraint("role_id", "menu_id", name="unique_role_menu"),)
