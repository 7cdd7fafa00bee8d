from __future__ import annotations
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Integer, String, Text, ForeignKey, DateTime, CheckConstraint
from typing import Optional

from .profile import Base, utcnow


class Order(Base):
    __tablename__ = 'orders'
    # Lifecycle status constants
    STATUS_PENDING = 'pending'
    STATUS_APPROVED = 'approved'
    STATUS_ASSIGNED = 'assigned'
    STATUS_PICKED = 'picked'
    STATUS_IN_LAUNDRY = 'in_laundry'
    STATUS_READY = 'ready'
    STATUS_OUT_FOR_DELIVERY = 'out_for_delivery'
    STATUS_DELIVERED = 'delivered'
    STATUS_CANCELLED = 'cancelled'
    ALL_STATUSES = (
        STATUS_PENDING,
        STATUS_APPROVED,
        STATUS_ASSIGNED,
        STATUS_PICKED,
        STATUS_IN_LAUNDRY,
        STATUS_READY,
        STATUS_OUT_FOR_DELIVERY,
        STATUS_DELIVERED,
        STATUS_CANCELLED
    )
    # Driver holds the order and is working it
    ACTIVE_STATUSES = (
        STATUS_ASSIGNED,
        STATUS_PICKED,
        STATUS_IN_LAUNDRY,
        STATUS_READY,
        STATUS_OUT_FOR_DELIVERY
    )
    TERMINAL_STATUSES = (STATUS_DELIVERED, STATUS_CANCELLED)
    __table_args__ = (CheckConstraint('garment_count >= 1', name='ck_orders_garment_count_positive'),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    customer_id: Mapped[int] = mapped_column(ForeignKey('profiles.id'), nullable=False, index=True)
    hub_id: Mapped[int] = mapped_column(ForeignKey('laundry_hubs.id'), nullable=False, index=True)
    driver_id: Mapped[Optional[int]] = mapped_column(ForeignKey('profiles.id'), nullable=True, index=True)
    service_type: Mapped[str] = mapped_column(String(32), nullable=False)
    garment_count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    pickup_address: Mapped[str] = mapped_column(String(255), nullable=False)
    special_instructions: Mapped[Optional[str]] = mapped_column(Text)
    total_amount: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default=STATUS_PENDING, index=True)
    estimated_delivery: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    admin_approved_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    admin_approved_by: Mapped[Optional[int]] = mapped_column(ForeignKey('profiles.id'), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    @property
    def is_terminal(self) -> bool:
        return self.status in self.TERMINAL_STATUSES
