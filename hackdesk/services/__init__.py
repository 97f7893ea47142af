from .applicants import decide_applicant, list_applicants, serialize_applicant
from .checkin import CheckInCoordinator, CheckInOutcome, CheckInResult

__all__ = [
    # checkin
    "CheckInCoordinator",
    "CheckInOutcome",
    "CheckInResult",
    # applicants
    "decide_applicant",
    "list_applicants",
    "serialize_applicant",
]
