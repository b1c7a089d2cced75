from typing import Dict, List, Optional, Sequence
from uuid import UUID
from sqlalchemy.orm import Session
from app.models.iam import Menu
from app.schemas.iam import MenuCreate, MenuUpdate
from app.crud.base import CRUDBase


class CRUDMenu(CRUDBase[Menu, MenuCreate, MenuUpdate]):
    search_columns = ("name", "slug", "url")

    # Display order; name and id make ties deterministic across backends
    ordering = (Menu.sort_order.asc(), Menu.name.asc(), Menu.id.asc())

    def get_page(self, db: Session, *, page: int = 1, limit: int = 10, search: Optional[str] = None, order_by=()):
        return super().get_page(db, page=page, limit=limit, search=search, order_by=order_by or self.ordering)

    def visible_query(self, db: Session):
        """Menus that are neither deleted nor switched off"""
        return self.active_query(db).filter(Menu.is_active.is_(True))

    def get_roots(self, db: Session) -> List[Menu]:
        return self.visible_query(db).filter(Menu.parent_id.is_(None)).order_by(*self.ordering).all()

    def get_children_by_parent(self, db: Session, *, parent_ids: Sequence[UUID]) -> Dict[UUID, List[Menu]]:
        """
        One query for the visible children of every given parent, grouped
        by parent id and kept in display order
        """
        grouped: Dict[UUID, List[Menu]] = {parent_id: [] for parent_id in parent_ids}
        if not parent_ids:
            return grouped
        children = (
            self.visible_query(db)
            .filter(Menu.parent_id.in_(list(parent_ids)))
            .order_by(*self.ordering)
            .all()
        )
        for child in children:
            grouped.setdefault(child.parent_id, []).append(child)
        return grouped

menu_crud = CRUDMenu(Menu)
