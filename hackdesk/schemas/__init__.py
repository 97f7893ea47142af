"""Pydantic schemas for request/response validation."""
from hackdesk.schemas.checkin import (
    CheckInRequest,
    ScanRequest,
    DisplayFields,
    CheckInSuccessResponse,
    CheckInFailureResponse,
    to_wire,
)
from hackdesk.schemas.applicant import ApplicantItem, ApplicantListResponse, DecisionRequest

__all__ = [
    "CheckInRequest",
    "ScanRequest",
    "DisplayFields",
    "CheckInSuccessResponse",
    "CheckInFailureResponse",
    "to_wire",
    "ApplicantItem",
    "ApplicantListResponse",
    "DecisionRequest",
]
