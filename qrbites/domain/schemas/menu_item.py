"""Pydantic schemas for Menu Items."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from qrbites.domain.schemas.common import CamelModel


def _check_name(value: Optional[str]) -> Optional[str]:
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


def _check_description(value: Optional[str]) -> Optional[str]:
    if value is not None and len(value) > 500:
        raise ValueError("Description cannot exceed 500 characters")
    return value


def _check_price(value: Optional[float]) -> Optional[float]:
    if value is not None and value < 0:
        raise ValueError("Price cannot be negative")
    return value


def _check_calories(value: Optional[int]) -> Optional[int]:
    if value is not None and value < 0:
        raise ValueError("Calories cannot be negative")
    return value


def _as_list(value):
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return value


class MenuItemCreate(CamelModel):
    name: str
    description: Optional[str] = None
    price: float = Field(allow_inf_nan=False)
    category: Optional[str] = None
    is_available: Optional[bool] = None
    allergens: List[str] = Field(default_factory=list)
    calories: Optional[int] = None
    tags: List[str] = Field(default_factory=list)
    menu_id: int

    _name = field_validator("name")(_check_name)
    _description = field_validator("description")(_check_description)
    _price = field_validator("price")(_check_price)
    _calories = field_validator("calories")(_check_calories)
    _lists = field_validator("allergens", "tags", mode="before")(_as_list)


class MenuItemUpdate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = Field(default=None, allow_inf_nan=False)
    category: Optional[str] = None
    is_available: Optional[bool] = None
    allergens: Optional[List[str]] = None
    calories: Optional[int] = None
    tags: Optional[List[str]] = None

    _name = field_validator("name")(_check_name)
    _description = field_validator("description")(_check_description)
    _price = field_validator("price")(_check_price)
    _calories = field_validator("calories")(_check_calories)
    _lists = field_validator("allergens", "tags", mode="before")(_as_list)


class MenuItemRead(CamelModel):
    id: int
    menu_id: int
    name: str
    description: Optional[str] = None
    price: float
    category: Optional[str] = None
    is_available: bool
    image_url: Optional[str] = None
    allergens: List[str] = []
    calories: Optional[int] = None
    tags: List[str] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class MenuItemImageRead(CamelModel):
    image_url: str
