"""Shared test helpers."""
import copy
import threading
from datetime import datetime, timezone

from hackdesk.db.models import Applicant
from hackdesk.db.store import ApplicantRecord, ApplicantStore, PrimitiveUnavailable

FIXED_NOW = datetime(2026, 10, 17, 9, 30, tzinfo=timezone.utc)


def fixed_clock():
    return FIXED_NOW


def display_fields_for(name, email, university="UMass Amherst", shirt_size="M"):
    return {"name": name, "email": email, "university": university, "shirt_size": shirt_size}


def make_record(record_id, token, checked_in_at=None, meal_checkins=None, name=None):
    """Build an ApplicantRecord with plausible display fields."""
    name = name or f"Attendee {record_id}"
    return ApplicantRecord(
        id=record_id,
        token=token,
        checked_in_at=checked_in_at,
        meal_checkins=dict(meal_checkins or {}),
        display_fields=display_fields_for(name, f"attendee{record_id}@example.edu"),
    )


def create_applicant(db, email, qr_token=None, full_name=None, **kwargs):
    """Insert an applicant row and return it."""
    applicant = Applicant(
        email=email,
        full_name=full_name,
        qr_token=qr_token,
        university=kwargs.pop("university", "UMass Amherst"),
        shirt_size=kwargs.pop("shirt_size", "M"),
        status=kwargs.pop("status", "accepted" if qr_token else "pending"),
        **kwargs
    )
    db.add(applicant)
    db.commit()
    db.refresh(applicant)
    return applicant


class FakeApplicantStore(ApplicantStore):
    """
    In-memory ApplicantStore.

    Each method runs under one lock, the way a single SQL statement is atomic,
    so concurrent callers interleave only between calls. Hooks run after a
    call returns its data and let tests pin down a specific interleaving.
    """

    def __init__(self, records=(), atomic_meal_primitive=True):
        self._lock = threading.Lock()
        self._records = {record.id: copy.deepcopy(record) for record in records}
        self.atomic_meal_primitive = atomic_meal_primitive
        self.fail_with = None
        self.after_find = None
        self.after_read_meal_checkins = None
        self.after_set_meal_checkins = None
        self.writes = []

    def get(self, record_id):
        with self._lock:
            return copy.deepcopy(self._records[record_id])

    def _check_failure(self):
        if self.fail_with is not None:
            raise self.fail_with

    def find_by_token(self, token):
        self._check_failure()
        with self._lock:
            found = next((r for r in self._records.values() if r.token == token), None)
            found = copy.deepcopy(found)
        if self.after_find:
            self.after_find()
        return found

    def conditional_set_checked_in(self, record_id, checked_in_at):
        self._check_failure()
        with self._lock:
            record = self._records[record_id]
            if record.checked_in_at is not None:
                return 0
            record.checked_in_at = checked_in_at
            self.writes.append(("checked_in_at", record_id))
            return 1

    def atomic_set_meal_key_if_absent(self, record_id, meal_tag, entry):
        self._check_failure()
        if not self.atomic_meal_primitive:
            raise PrimitiveUnavailable("function set_meal_checkin_if_absent does not exist")
        with self._lock:
            record = self._records[record_id]
            if meal_tag in record.meal_checkins:
                return False
            record.meal_checkins[meal_tag] = dict(entry)
            self.writes.append(("meal_checkins", record_id))
            return True

    def read_meal_checkins(self, record_id):
        self._check_failure()
        with self._lock:
            mapping = copy.deepcopy(self._records[record_id].meal_checkins)
        if self.after_read_meal_checkins:
            self.after_read_meal_checkins()
        return mapping

    def set_meal_checkins(self, record_id, mapping):
        self._check_failure()
        with self._lock:
            self._records[record_id].meal_checkins = copy.deepcopy(mapping)
            self.writes.append(("meal_checkins", record_id))
        if self.after_set_meal_checkins:
            self.after_set_meal_checkins()
