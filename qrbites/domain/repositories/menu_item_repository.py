"""
Menu Item Repository Interface.
"""

from typing import List

from qrbites.domain.models.menu_item import MenuItem
from qrbites.domain.repositories.base import BaseRepository


class MenuItemRepository(BaseRepository[MenuItem]):

    def available_for_menu(self, menu_id: int) -> List[MenuItem]:
        """Available items of a menu, ordered by category then name."""
        ...

    def categories_for_menu(self, menu_id: int) -> List[str]:
        """Distinct categories among the available items of a menu."""
        ...
