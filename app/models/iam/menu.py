import uuid

from sqlalchemy import Column, String, Integer, Boolean, ForeignKey, Index, Uuid, text
from app.database.session import Base
from app.models.iam.lifecycle import LifecycleMixin


class Menu(LifecycleMixin, Base):
    """
    Navigation node. The tree is rebuilt per query from ``parent_id``;
    children are never stored on the row.
    """
    __tablename__ = "menus"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False, index=True)
    slug = Column(String(100), nullable=False, index=True)
    url = Column(String(255))
    icon = Column(String(100))
    parent_id = Column(Uuid, ForeignKey("menus.id", ondelete="SET NULL"), nullable=True, index=True)
    sort_order = Column(Integer, default=0, nullable=False, index=True)
    is_active = Column(Boolean, default=True, nullable=False, index=True)

    __table_args__ = (
        Index(
            "uq_menus_slug_active", "slug", unique=True,
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
    )
