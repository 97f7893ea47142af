"""Admin endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from hackdesk.api.deps import get_db, verify_admin_token
from hackdesk.core.constants import DEFAULT_PAGE_SIZE
from hackdesk.core.rate_limit import limiter, RATE_LIMITS
from hackdesk.schemas import ApplicantItem, ApplicantListResponse, DecisionRequest
from hackdesk.services.applicants import decide_applicant, list_applicants

router = APIRouter(dependencies=[Depends(verify_admin_token)])


@router.get("/applicants", response_model=ApplicantListResponse)
@limiter.limit(RATE_LIMITS["admin_read"])
def list_applicants_endpoint(
    request: Request,
    page: int = Query(1),
    page_size: int = Query(DEFAULT_PAGE_SIZE, alias="pageSize"),
    q: str = Query("", max_length=200),
    db: Session = Depends(get_db)
):
    """
    List applicants newest first, with optional search (admin only).

    Out-of-range paging values are clamped rather than rejected: page to at
    least 1, pageSize to 1..200. q matches email or full name, case-insensitive.

    Example:
        Request:
            GET /api/v1/admin/applicants?page=2&pageSize=25&q=umass
            Authorization: Bearer <ADMIN_API_SECRET>

        Response (200):
            {"items": [...], "total": 137}
    """
    try:
        items, total = list_applicants(db, page=page, page_size=page_size, q=q)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return ApplicantListResponse(items=items, total=total)


@router.post("/applicants/{applicant_id}/decision", response_model=ApplicantItem)
@limiter.limit(RATE_LIMITS["admin_write"])
def decide_applicant_endpoint(
    request: Request,
    applicant_id: int,
    decision_request: DecisionRequest,
    db: Session = Depends(get_db)
):
    """
    Accept, waitlist or deny an applicant (admin only).

    Accepting issues the badge token the scanner stations check in against;
    an applicant who already has one keeps it. Decision emails are sent by a
    separate mailer and are not triggered here.

    Example:
        Request:
            POST /api/v1/admin/applicants/42/decision
            Authorization: Bearer <ADMIN_API_SECRET>
            {"decision": "accepted", "note": "Strong project history"}

        Response (200):
            {"id": 42, "status": "accepted", "qr_token": "9f2c4e1a7b3d5f60", ...}
    """
    try:
        applicant = decide_applicant(
            db,
            applicant_id,
            decision_request.decision,
            decision_request.note,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if applicant is None:
        raise HTTPException(status_code=404, detail="Applicant not found")
    return applicant
