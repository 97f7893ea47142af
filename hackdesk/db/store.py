"""
Applicant record store.

The check-in coordinator talks to the database only through the ApplicantStore
contract below. SqlApplicantStore implements it over the applicants table and
translates driver errors into a small closed set of store errors, so callers
never have to inspect error text:

- PrimitiveUnavailable: the atomic meal check-in primitive is not provisioned
- StoreConflict: the write violated an integrity constraint
- TransientStoreFailure: anything else the driver or connection raised
"""
import json
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterator, Optional

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from hackdesk.core.constants import MEAL_CHECKIN_FUNCTION
from hackdesk.db.models import Applicant

# Postgres SQLSTATE for undefined_function
UNDEFINED_FUNCTION = "42883"


class StoreError(Exception):
    """Base class for record store failures."""


class PrimitiveUnavailable(StoreError):
    """The store cannot perform an atomic set-if-absent on meal check-ins."""


class StoreConflict(StoreError):
    """The store rejected a write because it conflicts with existing data."""


class TransientStoreFailure(StoreError):
    """The store failed for infrastructure reasons (connection, timeout, ...)."""


@dataclass
class ApplicantRecord:
    """Snapshot of the fields the coordinator reads from an applicant."""
    id: int
    token: str
    checked_in_at: Optional[datetime] = None
    meal_checkins: Dict[str, Any] = field(default_factory=dict)
    display_fields: Dict[str, Any] = field(default_factory=dict)


class ApplicantStore(ABC):
    """Operations the check-in coordinator needs from persistent storage."""

    @abstractmethod
    def find_by_token(self, token: str) -> Optional[ApplicantRecord]:
        """Exact-match lookup by attendee token."""

    @abstractmethod
    def conditional_set_checked_in(self, record_id: int, checked_in_at: datetime) -> int:
        """Set checked_in_at only while it is still null. Returns affected rows."""

    @abstractmethod
    def atomic_set_meal_key_if_absent(self, record_id: int, meal_tag: str, entry: Dict[str, Any]) -> bool:
        """
        Store entry under meal_checkins[meal_tag] only if the key is absent.

        Returns True if this call wrote the key.

        Raises:
            PrimitiveUnavailable: If the store has no atomic way to do this
        """

    @abstractmethod
    def read_meal_checkins(self, record_id: int) -> Dict[str, Any]:
        """Read the current meal check-in mapping."""

    @abstractmethod
    def set_meal_checkins(self, record_id: int, mapping: Dict[str, Any]) -> None:
        """Overwrite the meal check-in mapping (unguarded write)."""


def classify_error(exc: SQLAlchemyError) -> StoreError:
    """Map a SQLAlchemy/driver exception onto the store error taxonomy."""
    orig = getattr(exc, "orig", None)

    # psycopg2 exposes pgcode, psycopg 3 exposes sqlstate
    sqlstate = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if sqlstate == UNDEFINED_FUNCTION:
        return PrimitiveUnavailable(str(orig))

    # SQLite has no SQLSTATE; the message is the only signal it gives
    if isinstance(exc, OperationalError) and "no such function" in str(orig or exc):
        return PrimitiveUnavailable(str(orig or exc))

    if isinstance(exc, IntegrityError):
        return StoreConflict(str(orig or exc))

    return TransientStoreFailure(str(orig or exc))


class SqlApplicantStore(ApplicantStore):
    """ApplicantStore over a SQLAlchemy session. Every write commits."""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _translate_errors(self) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise classify_error(exc) from exc

    def find_by_token(self, token: str) -> Optional[ApplicantRecord]:
        with self._translate_errors():
            applicant = self.db.query(Applicant).filter(Applicant.qr_token == token).first()

        if applicant is None:
            return None

        return ApplicantRecord(
            id=applicant.id,
            token=applicant.qr_token,
            checked_in_at=applicant.checked_in_at,
            meal_checkins=dict(applicant.meal_checkins or {}),
            display_fields=applicant.display_fields(),
        )

    def conditional_set_checked_in(self, record_id: int, checked_in_at: datetime) -> int:
        with self._translate_errors():
            affected = self.db.query(Applicant).filter(
                Applicant.id == record_id,
                Applicant.checked_in_at.is_(None)
            ).update(
                {Applicant.checked_in_at: checked_in_at},
                synchronize_session=False
            )
            self.db.commit()
        return affected

    def atomic_set_meal_key_if_absent(self, record_id: int, meal_tag: str, entry: Dict[str, Any]) -> bool:
        dialect = self.db.get_bind().dialect.name
        payload = json.dumps(entry)

        if dialect == "postgresql":
            stmt = text(
                f"SELECT {MEAL_CHECKIN_FUNCTION}(:record_id, :meal_tag, CAST(:entry AS jsonb))"
            )
            with self._translate_errors():
                applied = bool(self.db.execute(
                    stmt, {"record_id": record_id, "meal_tag": meal_tag, "entry": payload}
                ).scalar())
                self.db.commit()
            return applied

        if dialect == "sqlite":
            # A single guarded UPDATE; SQLite serializes writers.
            # The key is quoted so tags containing dots stay flat keys.
            stmt = text(
                "UPDATE applicants "
                "SET meal_checkins = json_set(COALESCE(meal_checkins, '{}'), :path, json(:entry)) "
                "WHERE id = :record_id "
                "AND json_extract(COALESCE(meal_checkins, '{}'), :path) IS NULL"
            )
            with self._translate_errors():
                result = self.db.execute(
                    stmt, {"record_id": record_id, "path": f'$."{meal_tag}"', "entry": payload}
                )
                self.db.commit()
            return result.rowcount == 1

        raise PrimitiveUnavailable(f"No atomic meal check-in primitive for dialect '{dialect}'")

    def read_meal_checkins(self, record_id: int) -> Dict[str, Any]:
        # Column query bypasses the identity map, so this sees other writers
        with self._translate_errors():
            mapping = self.db.query(Applicant.meal_checkins).filter(
                Applicant.id == record_id
            ).scalar()
        return dict(mapping or {})

    def set_meal_checkins(self, record_id: int, mapping: Dict[str, Any]) -> None:
        with self._translate_errors():
            self.db.query(Applicant).filter(Applicant.id == record_id).update(
                {Applicant.meal_checkins: dict(mapping)},
                synchronize_session=False
            )
            self.db.commit()
