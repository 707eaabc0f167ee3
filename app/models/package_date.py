from sqlalchemy import String, Integer, Boolean, Date, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, date, timezone
from app.db.session import Base

class PackageAvailableDate(Base):
    __tablename__ = "package_available_dates"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    package_id: Mapped[str] = mapped_column(String(36), ForeignKey("packages.id", ondelete="CASCADE"), index=True)
    available_date: Mapped[date] = mapped_column(Date, index=True)
    max_bookings: Mapped[int] = mapped_column(Integer, default=0)
    current_bookings: Mapped[int] = mapped_column(Integer, default=0)
    is_available: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
