"""Applicant listing and decisions for the admin dashboard."""
from typing import Dict, List, Optional, Tuple
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from hackdesk.db.models import Applicant
from hackdesk.core.constants import (
    APPLICANT_DECISIONS,
    DEFAULT_PAGE_SIZE,
    MAX_DECISION_NOTE_LENGTH,
    MAX_PAGE_SIZE,
)
from hackdesk.core.logging_config import get_logger
from hackdesk.core.sanitization import sanitize_search_query, sanitize_text
from hackdesk.core.security import generate_qr_token

logger = get_logger(__name__)


def serialize_applicant(applicant: Applicant) -> Dict:
    """Convert an applicant row to the dashboard's JSON shape."""
    return {
        "id": applicant.id,
        "email": applicant.email,
        "full_name": applicant.full_name,
        "university": applicant.university,
        "shirt_size": applicant.shirt_size,
        "status": applicant.status,
        "decision_note": applicant.decision_note,
        "qr_token": applicant.qr_token,
        "checked_in_at": applicant.checked_in_at.isoformat() if applicant.checked_in_at else None,
        "meal_checkins": {
            meal: entry.get("at") if isinstance(entry, dict) else entry
            for meal, entry in (applicant.meal_checkins or {}).items()
        },
        "created_at": applicant.created_at.isoformat() if applicant.created_at else None,
    }


def list_applicants(
    db: Session,
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
    q: str = "",
) -> Tuple[List[Dict], int]:
    """
    Page through applicants, newest first.

    Args:
        db: Database session
        page: 1-based page number (clamped to >= 1)
        page_size: Rows per page (clamped to 1..MAX_PAGE_SIZE)
        q: Case-insensitive substring matched against email or full name

    Returns:
        (items, total) where total counts every row matching q

    Raises:
        ValueError: If q fails sanitization
    """
    page = max(page, 1)
    page_size = min(max(page_size, 1), MAX_PAGE_SIZE)

    query = db.query(Applicant)

    pattern = sanitize_search_query(q)
    if pattern:
        like = f"%{pattern}%"
        query = query.filter(or_(
            Applicant.email.ilike(like, escape="\\"),
            Applicant.full_name.ilike(like, escape="\\"),
        ))

    total = query.count()
    rows = (
        query.order_by(Applicant.created_at.desc(), Applicant.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )

    return [serialize_applicant(row) for row in rows], total


def decide_applicant(
    db: Session,
    applicant_id: int,
    decision: str,
    note: Optional[str] = None,
) -> Optional[Dict]:
    """
    Record an accept, waitlist or deny decision.

    Acceptance issues a badge token unless the applicant already has one, so
    re-accepting never invalidates a badge that was already sent. Other
    decisions leave any existing token alone. A later decision replaces an
    earlier one.

    Args:
        db: Database session
        applicant_id: Applicant to decide on
        decision: One of APPLICANT_DECISIONS
        note: Optional organizer note; an empty note clears the previous one

    Returns:
        The serialized applicant, or None if no such applicant exists

    Raises:
        ValueError: If decision is unknown or note fails sanitization
    """
    decision = (decision or "").strip().lower()
    if decision not in APPLICANT_DECISIONS:
        raise ValueError(f"Decision must be one of: {', '.join(APPLICANT_DECISIONS)}")

    note = sanitize_text(note, max_length=MAX_DECISION_NOTE_LENGTH) if note else None

    # Retry in case a freshly generated token collides with an existing one
    for _ in range(3):
        applicant = db.query(Applicant).filter(Applicant.id == applicant_id).first()
        if applicant is None:
            return None

        token_issued = decision == "accepted" and not applicant.qr_token
        applicant.status = decision
        applicant.decision_note = note or None
        if token_issued:
            applicant.qr_token = generate_qr_token()

        try:
            db.commit()
            db.refresh(applicant)
        except IntegrityError:
            db.rollback()
            continue

        logger.info(
            "applicant_decided",
            applicant_id=applicant.id,
            decision=decision,
            token_issued=token_issued,
        )
        return serialize_applicant(applicant)

    raise ValueError("Could not issue a unique badge token")
