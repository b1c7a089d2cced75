import uuid

from sqlalchemy import Column, String, Text, Boolean, Index, Uuid, text
from app.database.session import Base
from app.models.iam.lifecycle import LifecycleMixin


class Permission(LifecycleMixin, Base):
    __tablename__ = "permissions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False, index=True)
    slug = Column(String(100), nullable=False, index=True)
    resource = Column(String(100), nullable=False, index=True)
    action = Column(String(50), nullable=False, index=True)  # view, create, edit, delete, ...
    description = Column(Text)
    is_active = Column(Boolean, default=True, nullable=False, index=True)

    # (resource, action) is the lookup key for checks but is not unique
    __table_args__ = (
        Index("idx_permissions_resource_action", "resource", "action"),
        Index(
            "uq_permissions_name_active", "name", unique=True,
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
        Index(
            "uq_permissions_slug_active", "slug", unique=True,
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
    )
