"""Pydantic schemas for the Restaurant domain."""

import re
from datetime import datetime
from typing import List, Optional

from pydantic import AnyHttpUrl, EmailStr, field_validator, model_validator

from qrbites.domain.schemas.common import CamelModel

PHONE_RE = re.compile(r"^\+[1-9]\d{7,14}$")
ZIP_RE = re.compile(r"^\d{5}$")
TIME_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def _check_name(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    if len(value) < 3:
        raise ValueError("Name must be at least 3 characters")
    if len(value) > 50:
        raise ValueError("Name cannot exceed 50 characters")
    return value


def _check_description(value: Optional[str]) -> Optional[str]:
    if value is not None and len(value) > 500:
        raise ValueError("Description cannot exceed 500 characters")
    return value


def _max_length(limit: int, label: str):
    def check(value: Optional[str]) -> Optional[str]:
        if value is not None and len(value) > limit:
            raise ValueError(f"{label} cannot exceed {limit} characters")
        return value
    return check


class Location(CamelModel):
    street: str
    house_number: str
    city: str
    zip_code: str

    _street = field_validator("street")(_max_length(100, "Street"))
    _house_number = field_validator("house_number")(_max_length(5, "House number"))
    _city = field_validator("city")(_max_length(50, "City"))

    @field_validator("zip_code")
    @classmethod
    def zip_format(cls, value: str) -> str:
        if not ZIP_RE.match(value):
            raise ValueError("Please provide a valid German postal code (5 digits, e.g., 12345)")
        return value


class LocationUpdate(CamelModel):
    street: Optional[str] = None
    house_number: Optional[str] = None
    city: Optional[str] = None
    zip_code: Optional[str] = None

    _street = field_validator("street")(_max_length(100, "Street"))
    _house_number = field_validator("house_number")(_max_length(5, "House number"))
    _city = field_validator("city")(_max_length(50, "City"))

    @field_validator("zip_code")
    @classmethod
    def zip_format(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not ZIP_RE.match(value):
            raise ValueError("Please provide a valid German postal code (5 digits, e.g., 12345)")
        return value


def _check_phone(value: Optional[str]) -> Optional[str]:
    if value is not None and not PHONE_RE.match(value):
        raise ValueError("Please provide a valid phone number in E.164 format (e.g., +491234567890)")
    return value


class Contact(CamelModel):
    phone: str
    email: Optional[EmailStr] = None
    website: Optional[AnyHttpUrl] = None

    _phone = field_validator("phone")(_check_phone)


class ContactUpdate(CamelModel):
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    website: Optional[AnyHttpUrl] = None

    _phone = field_validator("phone")(_check_phone)


class OpeningHours(CamelModel):
    day: int
    closed: bool
    open: Optional[str] = None
    close: Optional[str] = None

    @field_validator("day")
    @classmethod
    def day_range(cls, value: int) -> int:
        if not 0 <= value <= 6:
            raise ValueError("Day must be between 0 and 6")
        return value

    @field_validator("open", "close")
    @classmethod
    def time_format(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not TIME_RE.match(value):
            raise ValueError("Time must be in HH:MM format (e.g., 09:00)")
        return value

    @model_validator(mode="after")
    def times_required_when_open(self):
        if not self.closed and (self.open is None or self.close is None):
            raise ValueError("Open and close times are required unless the day is closed")
        return self


def _check_week(value: Optional[List[OpeningHours]]) -> Optional[List[OpeningHours]]:
    if value is None:
        return value
    if len(value) != 7:
        raise ValueError("Business hours must include all 7 days")
    if sorted(entry.day for entry in value) != list(range(7)):
        raise ValueError("Business hours must have exactly one entry per day (0-6)")
    return sorted(value, key=lambda entry: entry.day)


class RestaurantCreate(CamelModel):
    name: str
    description: Optional[str] = None
    location: Location
    contact: Contact
    hours: List[OpeningHours]
    logo_url: Optional[AnyHttpUrl] = None
    is_active: Optional[bool] = None

    _name = field_validator("name")(_check_name)
    _description = field_validator("description")(_check_description)
    _hours = field_validator("hours")(_check_week)


class RestaurantUpdate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    location: Optional[LocationUpdate] = None
    contact: Optional[ContactUpdate] = None
    hours: Optional[List[OpeningHours]] = None
    logo_url: Optional[AnyHttpUrl] = None
    is_active: Optional[bool] = None

    _name = field_validator("name")(_check_name)
    _description = field_validator("description")(_check_description)
    _hours = field_validator("hours")(_check_week)


class RestaurantOwner(CamelModel):
    id: int
    email: str


class RestaurantRead(CamelModel):
    id: int
    user_id: int
    name: str
    description: Optional[str] = None
    contact: dict
    location: dict
    hours: List[dict]
    logo_url: Optional[str] = None
    is_active: bool
    owner: Optional[RestaurantOwner] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RestaurantSummary(CamelModel):
    id: int
    name: str
    logo_url: Optional[str] = None


class LogoRead(CamelModel):
    logo_url: str
