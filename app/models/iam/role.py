import uuid

from sqlalchemy import Column, String, Text, Boolean, Index, Uuid, text
from app.database.session import Base
from app.models.iam.lifecycle import LifecycleMixin


class Role(LifecycleMixin, Base):
    __tablename__ = "roles"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False, index=True)
    slug = Column(String(100), nullable=False, index=True)
    description = Column(Text)
    is_active = Column(Boolean, default=True, nullable=False, index=True)

    # Name and slug are unique among live rows only, so a soft-deleted slug can be reused
    __table_args__ = (
        Index(
            "uq_roles_name_active", "name", unique=True,
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
        Index(
            "uq_roles_slug_active", "slug", unique=True,
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
    )
