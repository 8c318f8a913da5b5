"""Pydantic schemas for the unauthenticated public views."""

from datetime import datetime
from typing import Dict, List, Optional

from qrbites.domain.schemas.common import CamelModel
from qrbites.domain.schemas.restaurant import RestaurantSummary


class PublicMenu(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    qr_code_url: Optional[str] = None
    restaurant: Optional[RestaurantSummary] = None
    categories: List[str] = []
    is_active: bool
    updated_at: Optional[datetime] = None


class PublicMenuItem(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    price: float
    image_url: Optional[str] = None
    category: Optional[str] = None
    allergens: List[str] = []
    calories: Optional[int] = None
    tags: List[str] = []


class PublicMenuDetail(CamelModel):
    menu: PublicMenu
    categories: List[str]
    items_by_category: Dict[str, List[PublicMenuItem]]
    total_items: int


class PublicMenuLink(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    image_url: Optional[str] = None


class PublicRestaurant(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    logo_url: Optional[str] = None
    contact: dict
    location: dict
    hours: List[dict] = []
    menus: List[PublicMenuLink] = []
