"""Check-in endpoints used by scanner stations."""
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from hackdesk.api.deps import get_coordinator
from hackdesk.core import config
from hackdesk.core.qr import extract_token
from hackdesk.core.rate_limit import limiter, RATE_LIMITS
from hackdesk.core.sanitization import validate_token_format
from hackdesk.core.logging_config import get_logger
from hackdesk.schemas import (
    CheckInRequest,
    ScanRequest,
    CheckInSuccessResponse,
    CheckInFailureResponse,
    to_wire,
)
from hackdesk.services.checkin import CheckInCoordinator, CheckInOutcome, CheckInResult

logger = get_logger(__name__)
router = APIRouter()

STATUS_CODES = {
    CheckInOutcome.SUCCESS: 200,
    CheckInOutcome.ALREADY_CHECKED_IN: 409,
    CheckInOutcome.NOT_FOUND: 404,
    CheckInOutcome.STORE_ERROR: 503,
}

CHECK_IN_RESPONSES = {
    200: {"model": CheckInSuccessResponse, "description": "Checked in (or meal credited)"},
    404: {"model": CheckInFailureResponse, "description": "Token does not match any applicant"},
    409: {"model": CheckInFailureResponse, "description": "Already checked in for this dimension"},
    503: {"model": CheckInFailureResponse, "description": "Applicant store unavailable"},
}


def render_result(result: CheckInResult) -> JSONResponse:
    """Shape a coordinator outcome into the scanner's JSON contract."""
    if result.outcome is CheckInOutcome.SUCCESS:
        body = CheckInSuccessResponse(
            record_id=result.record_id,
            meal_tag=result.meal_tag,
            display_fields=result.display_fields,
        )
    elif result.outcome is CheckInOutcome.ALREADY_CHECKED_IN:
        body = CheckInFailureResponse(
            reason=result.outcome.value,
            display_fields=result.display_fields,
        )
    else:
        # NOT_FOUND and STORE_ERROR carry no applicant data
        body = CheckInFailureResponse(reason=result.outcome.value)

    return JSONResponse(status_code=STATUS_CODES[result.outcome], content=to_wire(body))


def run_check_in(coordinator: CheckInCoordinator, token: str, meal_tag: Optional[str]) -> JSONResponse:
    try:
        result = coordinator.check_in(token, meal_tag)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return render_result(result)


@router.post("", responses=CHECK_IN_RESPONSES)
@limiter.limit(RATE_LIMITS["check_in"])
def check_in_endpoint(
    request: Request,
    check_in_request: CheckInRequest,
    coordinator: CheckInCoordinator = Depends(get_coordinator)
):
    """
    Check an attendee in, or credit them for a meal, by badge token.

    Safe to call from any number of scanner stations at once: for a given
    token and meal (or the main check-in) exactly one call succeeds and every
    other call gets 409 ALREADY_CHECKED_IN, including re-scans.

    Args:
        request: FastAPI Request (for rate limiting)
        check_in_request: CheckInRequest with token and optional mealTag
        coordinator: CheckInCoordinator bound to this request's session

    Rate Limit:
        600 requests per minute per IP

    Example:
        Request:
            POST /api/v1/check-in
            {
                "token": "9f2c4e1a7b3d5f60",
                "mealTag": "sat_lunch"
            }

        Response (200):
            {
                "ok": true,
                "recordId": 42,
                "mealTag": "sat_lunch",
                "displayFields": {"name": "Ada Lovelace", "email": "ada@example.edu",
                                  "university": "UMass Amherst", "shirt_size": "M"}
            }

        Response (409):
            {
                "ok": false,
                "reason": "ALREADY_CHECKED_IN",
                "displayFields": {"name": "Ada Lovelace", ..., "shirt_size": "M"}
            }

        Response (404):
            {"ok": false, "reason": "NOT_FOUND"}

        Response (503):
            {"ok": false, "reason": "STORE_ERROR"}
    """
    return run_check_in(coordinator, check_in_request.token, check_in_request.meal_tag)


@router.post("/scan", responses=CHECK_IN_RESPONSES)
@limiter.limit(RATE_LIMITS["check_in"])
def scan_endpoint(
    request: Request,
    scan_request: ScanRequest,
    coordinator: CheckInCoordinator = Depends(get_coordinator)
):
    """
    Check in from raw QR text.

    Accepts whatever the camera decoded: the {"t": ..., "e": ...} JSON from
    acceptance emails, a {"token": ...} object, or a bare token. Payloads
    issued for a different EVENT_SLUG are rejected with 400. Text that cannot
    be a token (a foreign QR code, say) is NOT_FOUND, like any unknown badge.
    """
    try:
        token = extract_token(scan_request.payload, config.settings.EVENT_SLUG)
    except ValueError as e:
        logger.info("scan_payload_rejected", error=str(e))
        raise HTTPException(status_code=400, detail=str(e))

    try:
        token = validate_token_format(token)
    except ValueError as e:
        # Issued tokens always pass this check, so no applicant can match
        logger.info("scan_token_unrecognized", error=str(e))
        return render_result(CheckInResult.not_found())

    return run_check_in(coordinator, token, scan_request.meal_tag)
