"""
SQLAlchemy Implementation of Menu Item Repository.
"""

from typing import List

from qrbites.domain.models.menu_item import MenuItem
from qrbites.domain.repositories.menu_item_repository import MenuItemRepository
from qrbites.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyMenuItemRepository(SQLAlchemyRepository[MenuItem], MenuItemRepository):

    def _available(self, menu_id: int):
        return self.db.query(MenuItem).filter(MenuItem.menu_id == menu_id, MenuItem.is_available.is_(True))

    def available_for_menu(self, menu_id: int) -> List[MenuItem]:
        return self._available(menu_id).order_by(MenuItem.category, MenuItem.name).all()

    def categories_for_menu(self, menu_id: int) -> List[str]:
        rows = (
            self._available(menu_id)
            .with_entities(MenuItem.category)
            .filter(MenuItem.category.isnot(None))
            .distinct()
            .order_by(MenuItem.category)
            .all()
        )
        return [row[0] for row in rows]
