"""Applicant model."""
from datetime import datetime, timezone as tz
from sqlalchemy import JSON, Column, DateTime, Integer, String, Text, Index
from sqlalchemy.dialects.postgresql import JSONB

from hackdesk.db.base import Base

# JSONB on Postgres so the stored function can use the ? key-exists operator
MealCheckinsType = JSON().with_variant(JSONB(), "postgresql")


class Applicant(Base):
    __tablename__ = "applicants"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(320), nullable=False, index=True)
    full_name = Column(String(200), nullable=True)
    university = Column(String(200), nullable=True)
    shirt_size = Column(String(10), nullable=True)
    status = Column(String(20), nullable=False, default="pending")
    decision_note = Column(Text, nullable=True)
    qr_token = Column(String(64), unique=True, nullable=True)  # Sparse: only accepted applicants get one
    checked_in_at = Column(DateTime(timezone=True), nullable=True)
    meal_checkins = Column(MealCheckinsType, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(tz.utc))

    __table_args__ = (
        Index("idx_applicants_created_at", "created_at"),
    )

    def display_fields(self) -> dict:
        """Profile fields shown to the scanning organizer."""
        return {
            "name": self.full_name or self.email,
            "email": self.email,
            "university": self.university,
            "shirt_size": self.shirt_size,
        }
