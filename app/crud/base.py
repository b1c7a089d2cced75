from datetime import datetime, timezone
from typing import Any, Dict, Generic, List, Optional, Sequence, Tuple, Type, TypeVar, Union
from uuid import UUID

from pydantic import BaseModel
from sqlalchemy import func, or_
from sqlalchemy.orm import Query, Session

from app.database.session import Base

ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def escape_like(value: str) -> str:
    """Make %, _ and the escape character itself match literally in LIKE"""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """
    Base class for CRUD operations on soft-deletable models.

    Every read starts from ``active_query`` so rows with ``deleted_at`` set
    never leak into lookups, listings or uniqueness checks. Writes only
    flush; committing belongs to the caller's transaction.
    """
    search_columns: Tuple[str, ...] = ()

    def __init__(self, model: Type[ModelType]):
        """
        Initialize with the model class
        """
        self.model = model

    def active_query(self, db: Session) -> Query:
        """
        Query over rows that have not been soft-deleted
        """
        return db.query(self.model).filter(self.model.deleted_at.is_(None))

    def get(self, db: Session, id: UUID) -> Optional[ModelType]:
        """
        Get an active object by ID, or None when absent or deleted
        """
        return self.active_query(db).filter(self.model.id == id).first()

    def get_by_slug(self, db: Session, *, slug: str) -> Optional[ModelType]:
        return self.active_query(db).filter(self.model.slug == slug).first()

    def get_multi_by_ids(self, db: Session, *, ids: Sequence[UUID]) -> List[ModelType]:
        if not ids:
            return []
        return self.active_query(db).filter(self.model.id.in_(list(ids))).all()

    def search_query(self, db: Session, *, search: Optional[str] = None) -> Query:
        """
        Active rows, optionally narrowed by a case-insensitive substring
        match over ``search_columns``
        """
        query = self.active_query(db)
        if search:
            pattern = f"%{escape_like(search.lower())}%"
            query = query.filter(
                or_(*[
                    func.lower(getattr(self.model, column)).like(pattern, escape="\\")
                    for column in self.search_columns
                ])
            )
        return query

    def get_page(
        self,
        db: Session,
        *,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
        order_by: Sequence[Any] = (),
    ) -> Tuple[List[ModelType], int]:
        """
        Get one page of active objects and the total count of matches
        """
        query = self.search_query(db, search=search)
        total = query.count()
        if order_by:
            query = query.order_by(*order_by)
        items = query.offset((page - 1) * limit).limit(limit).all()
        return items, total

    def create(self, db: Session, *, obj_in: Union[CreateSchemaType, Dict[str, Any]], actor_id: Optional[UUID] = None) -> ModelType:
        """
        Create a new object
        """
        obj_in_data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump()
        now = utcnow()
        db_obj = self.model(
            **obj_in_data,
            created_by=actor_id,
            created_at=now,
            updated_at=now,
        )
        db.add(db_obj)
        db.flush()
        return db_obj

    def update(
        self,
        db: Session,
        *,
        db_obj: ModelType,
        obj_in: Union[UpdateSchemaType, Dict[str, Any]],
        actor_id: Optional[UUID] = None,
    ) -> ModelType:
        """
        Apply only the fields present in ``obj_in``
        """
        if isinstance(obj_in, dict):
            update_data = obj_in
        else:
            update_data = obj_in.model_dump(exclude_unset=True)

        for field, value in update_data.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)

        db_obj.updated_by = actor_id
        db_obj.updated_at = utcnow()
        db.add(db_obj)
        db.flush()
        return db_obj

    def soft_delete(self, db: Session, *, db_obj: ModelType, actor_id: Optional[UUID] = None) -> ModelType:
        """
        Mark an object deleted; the row stays for audit
        """
        db_obj.deleted_at = utcnow()
        db_obj.deleted_by = actor_id
        db.add(db_obj)
        db.flush()
        return db_obj
