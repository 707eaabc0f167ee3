from sqlalchemy import String, Integer, Date, DateTime, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from datetime import datetime, date, timezone
from app.db.session import Base
from app.models.booking_member import BookingMember
from app.models.package import Package

BOOKING_STATUSES = ("pending", "confirmed", "cancelled")
PAYMENT_STATUSES = ("advance_paid", "fully_paid")

class Booking(Base):
    __tablename__ = "bookings"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    # plain ids, no FK: deleting a package or profile leaves its bookings in place
    user_id: Mapped[str] = mapped_column(String(36), index=True)
    package_id: Mapped[str] = mapped_column(String(36), index=True)

    booking_date: Mapped[date] = mapped_column(Date)  # travel date
    travel_group_name: Mapped[str] = mapped_column(String(200), default="")
    number_of_members: Mapped[int] = mapped_column(Integer, default=1)
    total_price: Mapped[int] = mapped_column(Integer, default=0)
    advance_paid: Mapped[int] = mapped_column(Integer, default=0)

    status: Mapped[str] = mapped_column(String(20), default="pending", index=True)  # pending, confirmed, cancelled
    payment_status: Mapped[str] = mapped_column(String(20), default="advance_paid")  # advance_paid, fully_paid

    admin_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    whatsapp_conversation_link: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    package: Mapped[Package | None] = relationship(
        Package,
        primaryjoin="foreign(Booking.package_id) == Package.id",
        viewonly=True,
    )
    members: Mapped[list[BookingMember]] = relationship(
        BookingMember,
        order_by=BookingMember.created_at,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
