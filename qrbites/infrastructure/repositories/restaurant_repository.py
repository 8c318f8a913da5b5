"""
SQLAlchemy Implementation of Restaurant Repository.
"""

from typing import List, Optional

from qrbites.domain.models.restaurant import Restaurant
from qrbites.domain.repositories.restaurant_repository import RestaurantRepository
from qrbites.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyRestaurantRepository(SQLAlchemyRepository[Restaurant], RestaurantRepository):

    def ids_for_owner(self, user_id: int) -> List[int]:
        rows = self.db.query(Restaurant.id).filter(Restaurant.user_id == user_id).all()
        return [row[0] for row in rows]

    def get_active(self, id: int) -> Optional[Restaurant]:
        return (
            self.db.query(Restaurant)
            .filter(Restaurant.id == id, Restaurant.is_active.is_(True))
            .first()
        )
