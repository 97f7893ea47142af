"""Database models."""
from hackdesk.db.models.applicant import Applicant

__all__ = ["Applicant"]
