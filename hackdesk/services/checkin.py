"""
Check-in business logic.

CheckInCoordinator moves an attendee from "not checked in" to "checked in",
or credits one meal, at most once per attendee and dimension, no matter how
many organizers scan the same badge at the same moment. Exclusion comes from
the store's conditional writes; the coordinator keeps no state between calls.

Meal check-ins prefer the store's atomic set-if-absent primitive. When the
store reports it as unavailable, the coordinator falls back to
read-modify-write followed by a re-read that checks this call's write_id
survived. That fallback is weaker: a concurrent caller can still slip in
between the read and the write, or between another caller's write and its
re-read, and the unguarded write replaces the whole mapping.
"""
import secrets
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, Iterable, Optional

from hackdesk.core.constants import (
    DEFAULT_MEAL_TAGS,
    REASON_ALREADY_CHECKED_IN,
    REASON_NOT_FOUND,
    REASON_STORE_ERROR,
)
from hackdesk.core.logging_config import get_logger
from hackdesk.db.store import (
    ApplicantRecord,
    ApplicantStore,
    PrimitiveUnavailable,
    StoreConflict,
    StoreError,
)

logger = get_logger(__name__)


class CheckInOutcome(str, Enum):
    SUCCESS = "SUCCESS"
    ALREADY_CHECKED_IN = REASON_ALREADY_CHECKED_IN
    NOT_FOUND = REASON_NOT_FOUND
    STORE_ERROR = REASON_STORE_ERROR


@dataclass
class CheckInResult:
    """Outcome of a single scan."""
    outcome: CheckInOutcome
    record_id: Optional[int] = None
    meal_tag: Optional[str] = None
    display_fields: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.outcome is CheckInOutcome.SUCCESS

    @classmethod
    def success(cls, record: ApplicantRecord, meal_tag: Optional[str] = None) -> "CheckInResult":
        return cls(CheckInOutcome.SUCCESS, record.id, meal_tag, dict(record.display_fields))

    @classmethod
    def already_checked_in(cls, record: ApplicantRecord, meal_tag: Optional[str] = None) -> "CheckInResult":
        return cls(CheckInOutcome.ALREADY_CHECKED_IN, record.id, meal_tag, dict(record.display_fields))

    @classmethod
    def not_found(cls) -> "CheckInResult":
        return cls(CheckInOutcome.NOT_FOUND)

    @classmethod
    def store_error(cls) -> "CheckInResult":
        return cls(CheckInOutcome.STORE_ERROR)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_write_id() -> str:
    """Opaque token identifying one meal check-in write."""
    return secrets.token_hex(16)


class CheckInCoordinator:
    """Applies scan events to applicant records."""

    def __init__(
        self,
        store: ApplicantStore,
        meal_tags: Iterable[str] = DEFAULT_MEAL_TAGS,
        clock: Callable[[], datetime] = utc_now,
        write_id_factory: Callable[[], str] = new_write_id,
    ):
        self.store = store
        self.meal_tags = frozenset(meal_tags)
        self.clock = clock
        self.write_id_factory = write_id_factory

    def check_in(self, token: str, meal_tag: Optional[str] = None) -> CheckInResult:
        """
        Check an attendee in, or credit them for a meal.

        Args:
            token: Attendee token decoded from the badge QR code
            meal_tag: Meal to credit; omit for the main event check-in

        Returns:
            CheckInResult with outcome SUCCESS, ALREADY_CHECKED_IN,
            NOT_FOUND or STORE_ERROR

        Raises:
            ValueError: If token is empty or meal_tag is not a configured meal
        """
        if not token or not token.strip():
            raise ValueError("Token is required")
        if meal_tag is not None and meal_tag not in self.meal_tags:
            raise ValueError(f"Unknown meal tag '{meal_tag}'")

        try:
            record = self.store.find_by_token(token)
            if record is None:
                logger.info("checkin_token_not_found", meal_tag=meal_tag)
                return CheckInResult.not_found()

            if meal_tag is None:
                return self._check_in_main(record)
            return self._check_in_meal(record, meal_tag)
        except StoreError as exc:
            logger.error(
                "checkin_store_error",
                meal_tag=meal_tag,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return CheckInResult.store_error()

    def _check_in_main(self, record: ApplicantRecord) -> CheckInResult:
        if record.checked_in_at is not None:
            logger.info("checkin_already_checked_in", record_id=record.id)
            return CheckInResult.already_checked_in(record)

        affected = self.store.conditional_set_checked_in(record.id, self.clock())
        if affected == 0:
            # Another scanner passed the null guard first
            logger.info("checkin_race_lost", record_id=record.id)
            return CheckInResult.already_checked_in(record)

        logger.info("checkin_succeeded", record_id=record.id)
        return CheckInResult.success(record)

    def _check_in_meal(self, record: ApplicantRecord, meal_tag: str) -> CheckInResult:
        if meal_tag in record.meal_checkins:
            logger.info("meal_checkin_already_recorded", record_id=record.id, meal_tag=meal_tag)
            return CheckInResult.already_checked_in(record, meal_tag)

        entry = {"at": self.clock().isoformat(), "write_id": self.write_id_factory()}

        try:
            applied = self.store.atomic_set_meal_key_if_absent(record.id, meal_tag, entry)
        except PrimitiveUnavailable as exc:
            logger.warning(
                "meal_checkin_fallback",
                record_id=record.id,
                meal_tag=meal_tag,
                reason=str(exc),
            )
            return self._check_in_meal_fallback(record, meal_tag, entry)
        except StoreConflict:
            applied = False

        if not applied:
            logger.info("meal_checkin_race_lost", record_id=record.id, meal_tag=meal_tag)
            return CheckInResult.already_checked_in(record, meal_tag)

        logger.info("meal_checkin_succeeded", record_id=record.id, meal_tag=meal_tag)
        return CheckInResult.success(record, meal_tag)

    def _check_in_meal_fallback(
        self,
        record: ApplicantRecord,
        meal_tag: str,
        entry: Dict[str, Any],
    ) -> CheckInResult:
        current = self.store.read_meal_checkins(record.id)
        if meal_tag in current:
            return CheckInResult.already_checked_in(record, meal_tag)

        updated = dict(current)
        updated[meal_tag] = entry
        self.store.set_meal_checkins(record.id, updated)

        # The write above is unguarded; only trust it if it is still there
        stored = self.store.read_meal_checkins(record.id).get(meal_tag)
        if not isinstance(stored, dict) or stored.get("write_id") != entry["write_id"]:
            logger.warning("meal_checkin_lost_update", record_id=record.id, meal_tag=meal_tag)
            return CheckInResult.already_checked_in(record, meal_tag)

        logger.info("meal_checkin_succeeded", record_id=record.id, meal_tag=meal_tag, fallback=True)
        return CheckInResult.success(record, meal_tag)
