"""
SQLAlchemy Implementation of Menu Repository.
"""

from typing import List, Optional

from sqlalchemy.orm import joinedload, selectinload

from qrbites.domain.models.menu import Menu
from qrbites.domain.repositories.menu_repository import MenuRepository
from qrbites.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyMenuRepository(SQLAlchemyRepository[Menu], MenuRepository):

    def get_with_items(self, id: int) -> Optional[Menu]:
        return (
            self.db.query(Menu)
            .options(joinedload(Menu.restaurant), selectinload(Menu.menu_items))
            .filter(Menu.id == id)
            .first()
        )

    def get_active(self, id: int) -> Optional[Menu]:
        return (
            self.db.query(Menu)
            .options(joinedload(Menu.restaurant))
            .filter(Menu.id == id, Menu.is_active.is_(True))
            .first()
        )

    def active_for_restaurant(self, restaurant_id: int) -> List[Menu]:
        return (
            self.db.query(Menu)
            .filter(Menu.restaurant_id == restaurant_id, Menu.is_active.is_(True))
            .order_by(Menu.created_at.desc(), Menu.id.desc())
            .all()
        )
