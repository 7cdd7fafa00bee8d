from __future__ import annotations
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Integer, String, Float, ForeignKey, DateTime
from typing import Optional

from .profile import Base, utcnow


class TrackingEvent(Base):
    """Append-only position/status snapshot for an order. Rows are never updated or deleted."""
    __tablename__ = 'order_tracking'
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    order_id: Mapped[int] = mapped_column(ForeignKey('orders.id'), nullable=False, index=True)
    driver_id: Mapped[Optional[int]] = mapped_column(ForeignKey('profiles.id'), nullable=True)
    latitude: Mapped[Optional[float]] = mapped_column(Float)
    longitude: Mapped[Optional[float]] = mapped_column(Float)
    status_message: Mapped[Optional[str]] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
