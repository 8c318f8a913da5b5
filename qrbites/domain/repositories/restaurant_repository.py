"""
Restaurant Repository Interface.
"""

from typing import List, Optional

from qrbites.domain.models.restaurant import Restaurant
from qrbites.domain.repositories.base import BaseRepository


class RestaurantRepository(BaseRepository[Restaurant]):

    def ids_for_owner(self, user_id: int) -> List[int]:
        """IDs of every restaurant owned by a user."""
        ...

    def get_active(self, id: int) -> Optional[Restaurant]:
        ...
