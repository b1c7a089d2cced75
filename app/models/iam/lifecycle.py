from sqlalchemy import Column, DateTime, Uuid, func


class LifecycleMixin:
    """
    Audit and soft-delete columns shared by roles, permissions and menus.

    A row is active while ``deleted_at`` is NULL; reads go through
    ``CRUDBase.active_query`` which applies that filter.
    """

    created_at = Column(DateTime, default=func.now(), nullable=False)
    created_by = Column(Uuid, nullable=True)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)
    updated_by = Column(Uuid, nullable=True)
    deleted_at = Column(DateTime, nullable=True, index=True)
    deleted_by = Column(Uuid, nullable=True)
