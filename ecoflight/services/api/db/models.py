from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Float, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OffsetAcknowledgment(Base):
    """A club member's acknowledgment that a flight's CO2 has been offset."""
    __tablename__ = "offset_acknowledgments"

    id = Column(Integer, primary_key=True)
    club_id = Column(String(64), nullable=False, index=True)
    user_id = Column(String(64), nullable=False, index=True)
    flight_id = Column(String(64), nullable=False)

    co2_kg = Column(Float, nullable=False)
    offset_cost = Column(Float, nullable=False)
    price_per_tonne = Column(Float, nullable=False)
    note = Column(Text, default="")

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (UniqueConstraint("club_id", "flight_id", name="ux_offset_club_flight"),)
