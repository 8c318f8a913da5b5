"""
API Dependencies.
Repository providers bound to the request's database session.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from qrbites.domain.models.menu import Menu
from qrbites.domain.models.menu_item import MenuItem
from qrbites.domain.models.restaurant import Restaurant
from qrbites.domain.models.user import User
from qrbites.domain.repositories.menu_item_repository import MenuItemRepository
from qrbites.domain.repositories.menu_repository import MenuRepository
from qrbites.domain.repositories.restaurant_repository import RestaurantRepository
from qrbites.domain.repositories.user_repository import UserRepository
from qrbites.infrastructure.database import get_db
from qrbites.infrastructure.repositories.menu_item_repository import SQLAlchemyMenuItemRepository
from qrbites.infrastructure.repositories.menu_repository import SQLAlchemyMenuRepository
from qrbites.infrastructure.repositories.restaurant_repository import SQLAlchemyRestaurantRepository
from qrbites.infrastructure.repositories.user_repository import SQLAlchemyUserRepository


def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    """Get user repository instance."""
    return SQLAlchemyUserRepository(db, User)


def get_restaurant_repository(db: Session = Depends(get_db)) -> RestaurantRepository:
    """Get restaurant repository instance."""
    return SQLAlchemyRestaurantRepository(db, Restaurant)


def get_menu_repository(db: Session = Depends(get_db)) -> MenuRepository:
    """Get menu repository instance."""
    return SQLAlchemyMenuRepository(db, Menu)


def get_menu_item_repository(db: Session = Depends(get_db)) -> MenuItemRepository:
    """Get menu item repository instance."""
    return SQLAlchemyMenuItemRepository(db, MenuItem)
