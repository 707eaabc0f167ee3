from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.package import PackageSummary

BookingStatus = Literal["pending", "confirmed", "cancelled"]
PaymentStatus = Literal["advance_paid", "fully_paid"]


class MemberIn(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    phone: str = Field(min_length=1, max_length=40)


class BookingCreate(BaseModel):
    package_id: str
    booking_date: date
    travel_group_name: str = Field(min_length=1, max_length=200)
    number_of_members: int = Field(ge=1)
    # trusted as supplied by the client; not recomputed from the package
    total_price: int = Field(ge=0)
    advance_paid: int = Field(0, ge=0)
    members: List[MemberIn] = Field(min_length=1)


class MemberOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    member_name: str
    member_phone: str


class BookingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    package_id: str
    booking_date: date
    travel_group_name: str
    number_of_members: int
    total_price: int
    advance_paid: int
    status: str
    payment_status: str
    admin_notes: Optional[str] = None
    whatsapp_conversation_link: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    package: Optional[PackageSummary] = None
    members: List[MemberOut] = []


class BookingCreated(BookingOut):
    whatsapp_url: Optional[str] = None


class BookingStatusUpdate(BaseModel):
    status: BookingStatus
    admin_notes: Optional[str] = None
    whatsapp_conversation_link: Optional[str] = None


class PaymentStatusUpdate(BaseModel):
    payment_status: PaymentStatus


class DashboardMetricsOut(BaseModel):
    total_bookings: int
    pending_bookings: int
    confirmed_bookings: int
    cancelled_bookings: int
    total_revenue: int
    advance_revenue: int
