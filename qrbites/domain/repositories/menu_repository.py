"""
Menu Repository Interface.
"""

from typing import List, Optional

from qrbites.domain.models.menu import Menu
from qrbites.domain.repositories.base import BaseRepository


class MenuRepository(BaseRepository[Menu]):

    def get_with_items(self, id: int) -> Optional[Menu]:
        """Menu with its restaurant and menu items loaded."""
        ...

    def get_active(self, id: int) -> Optional[Menu]:
        ...

    def active_for_restaurant(self, restaurant_id: int) -> List[Menu]:
        ...
