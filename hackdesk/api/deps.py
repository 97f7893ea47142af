"""Shared API dependencies."""
from fastapi import Depends
from sqlalchemy.orm import Session

from hackdesk.db import get_db
from hackdesk.db.store import SqlApplicantStore
from hackdesk.core import config
from hackdesk.core.security import verify_admin_token
from hackdesk.services.checkin import CheckInCoordinator


def get_coordinator(db: Session = Depends(get_db)) -> CheckInCoordinator:
    """Per-request coordinator over the request's database session."""
    return CheckInCoordinator(
        SqlApplicantStore(db),
        meal_tags=config.settings.MEAL_TAGS,
    )


__all__ = ["get_db", "get_coordinator", "verify_admin_token"]
