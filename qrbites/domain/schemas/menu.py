"""Pydantic schemas for Menus."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from qrbites.domain.schemas.common import CamelModel
from qrbites.domain.schemas.menu_item import MenuItemRead
from qrbites.domain.schemas.restaurant import RestaurantSummary


def check_name(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    if not value:
        raise ValueError("Name is required")
    if len(value) < 3:
        raise ValueError("Name must be at least 3 characters")
    if len(value) > 50:
        raise ValueError("Name cannot exceed 50 characters")
    return value


def check_description(value: Optional[str]) -> Optional[str]:
    if value is not None and len(value) > 500:
        raise ValueError("Description cannot exceed 500 characters")
    return value


def _as_list(value):
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return value


class MenuCreate(CamelModel):
    name: str
    description: Optional[str] = None
    is_active: Optional[bool] = None
    categories: List[str] = Field(default_factory=list)
    restaurant_id: int

    _name = field_validator("name")(check_name)
    _description = field_validator("description")(check_description)
    _categories = field_validator("categories", mode="before")(_as_list)


class MenuUpdate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None
    categories: Optional[List[str]] = None

    _name = field_validator("name")(check_name)
    _description = field_validator("description")(check_description)
    _categories = field_validator("categories", mode="before")(_as_list)


class MenuRead(CamelModel):
    id: int
    restaurant_id: int
    name: str
    description: Optional[str] = None
    is_active: bool
    categories: List[str] = []
    image_url: Optional[str] = None
    image_urls: List[str] = []
    qr_code_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class MenuDetail(MenuRead):
    restaurant: Optional[RestaurantSummary] = None
    menu_items: List[MenuItemRead] = []


class MenuImageRead(CamelModel):
    image_url: str


class QrCodeData(CamelModel):
    url: str
    download_url: str
    public_url: str
    generated_at: datetime


class QrCodeRead(CamelModel):
    qr_code_url: str
    qr_code_data: QrCodeData
