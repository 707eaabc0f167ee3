from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Inclusion(BaseModel):
    icon: str = ""
    text: str


class Activity(BaseModel):
    time: str = ""
    activity: str


class ItineraryDay(BaseModel):
    day: int
    title: str = ""
    activities: List[Activity] = []


class ContactInfo(BaseModel):
    note: str = ""
    phone: str = ""


class PackageIn(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = ""
    destination: str = ""
    price_per_head: int = Field(ge=0)
    advance_payment: int = Field(0, ge=0)
    duration_days: int = Field(1, ge=1)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    max_capacity: int = Field(0, ge=0)
    image_url: Optional[str] = None
    gallery_images: List[str] = []
    inclusions: List[Inclusion] = []
    facilities: List[Inclusion] = []
    itinerary: List[ItineraryDay] = []
    contact_info: Optional[ContactInfo] = None
    is_active: bool = True


class PackagePatch(BaseModel):
    """Partial update; only fields that are sent are written."""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    destination: Optional[str] = None
    price_per_head: Optional[int] = Field(None, ge=0)
    advance_payment: Optional[int] = Field(None, ge=0)
    duration_days: Optional[int] = Field(None, ge=1)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    max_capacity: Optional[int] = Field(None, ge=0)
    image_url: Optional[str] = None
    gallery_images: Optional[List[str]] = None
    inclusions: Optional[List[Inclusion]] = None
    facilities: Optional[List[Inclusion]] = None
    itinerary: Optional[List[ItineraryDay]] = None
    contact_info: Optional[ContactInfo] = None
    is_active: Optional[bool] = None

    @field_validator(
        "title", "description", "destination", "price_per_head", "advance_payment", "duration_days",
        "max_capacity", "gallery_images", "inclusions", "facilities", "itinerary", "is_active",
        mode="before",
    )
    @classmethod
    def reject_null(cls, v, info):
        # omit a field to leave it unchanged; only the nullable columns accept null
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v


class PackageOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: str = ""
    destination: str = ""
    price_per_head: int
    advance_payment: int
    duration_days: int
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    max_capacity: int
    image_url: Optional[str] = None
    gallery_images: List[str] = []
    inclusions: List[Inclusion] = []
    facilities: List[Inclusion] = []
    itinerary: List[ItineraryDay] = []
    contact_info: Optional[ContactInfo] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class PackageSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    price_per_head: int
    image_url: Optional[str] = None


class AvailableDateIn(BaseModel):
    available_date: date
    max_bookings: int = Field(0, ge=0)


class AvailableDateOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    package_id: str
    available_date: date
    max_bookings: int
    current_bookings: int
    is_available: bool
    created_at: datetime


class AvailabilityPatch(BaseModel):
    is_available: bool
