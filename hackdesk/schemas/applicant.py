"""Applicant schemas."""
from typing import Dict, List, Optional
from pydantic import BaseModel, Field

from hackdesk.core.constants import MAX_DECISION_NOTE_LENGTH


class ApplicantItem(BaseModel):
    id: int
    email: str
    full_name: Optional[str] = None
    university: Optional[str] = None
    shirt_size: Optional[str] = None
    status: str
    decision_note: Optional[str] = None
    qr_token: Optional[str] = None
    checked_in_at: Optional[str] = None
    meal_checkins: Dict[str, Optional[str]] = {}
    created_at: Optional[str] = None


class ApplicantListResponse(BaseModel):
    items: List[ApplicantItem]
    total: int


class DecisionRequest(BaseModel):
    decision: str = Field(..., min_length=1, max_length=20)  # accepted, waitlisted or denied
    note: Optional[str] = Field(None, max_length=MAX_DECISION_NOTE_LENGTH)
