from sqlalchemy import String, Integer, Boolean, Date, DateTime, Text, JSON
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, date, timezone
from app.db.session import Base

class Package(Base):
    __tablename__ = "packages"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    title: Mapped[str] = mapped_column(String(200))
    description: Mapped[str] = mapped_column(Text, default="")
    destination: Mapped[str] = mapped_column(String(200), default="")

    price_per_head: Mapped[int] = mapped_column(Integer, default=0)
    advance_payment: Mapped[int] = mapped_column(Integer, default=0)  # per head
    duration_days: Mapped[int] = mapped_column(Integer, default=1)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    max_capacity: Mapped[int] = mapped_column(Integer, default=0)

    image_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    gallery_images: Mapped[list] = mapped_column(JSON, default=list)
    inclusions: Mapped[list] = mapped_column(JSON, default=list)   # [{icon, text}]
    facilities: Mapped[list] = mapped_column(JSON, default=list)   # [{icon, text}]
    itinerary: Mapped[list] = mapped_column(JSON, default=list)    # [{day, title, activities: [{time, activity}]}]
    contact_info: Mapped[dict | None] = mapped_column(JSON, nullable=True)  # {note, phone}

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
