"""
Shared CRUD logic for publicly submitted records.

Bookings and partnership applications have the same lifecycle: they are
created by a public submission, listed and inspected by staff, have
their ``status`` changed by an administrative call and are eventually
deleted.  ``RecordService`` implements that lifecycle once; subclasses
declare the table, the validation rules and any extra listing filters.
Status transitions are unconstrained: any value of the status set may
follow any other.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Generic, List, Mapping, Optional, Sequence, Tuple, Type, TypeVar

from pydantic import BaseModel

from carwash_api.app.core.config import Settings
from carwash_api.app.core.db import Database, new_id, to_timestamp, utc_now
from carwash_api.app.core.errors import NotFound, ValidationFailed
from carwash_api.app.core.validation import FieldRule, validate_choice, validate_record

ReadModel = TypeVar("ReadModel", bound=BaseModel)


@dataclass
class Page(Generic[ReadModel]):
    """One page of a filtered, sorted listing."""

    items: List[ReadModel]
    total: int
    page: int
    limit: int

    @property
    def count(self) -> int:
        return len(self.items)

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


class RecordService(Generic[ReadModel]):
    """CRUD operations over a single collection."""

    table: str
    # Singular noun used in log lines and error messages.
    noun: str
    rules: Sequence[FieldRule]
    status_rule: FieldRule
    read_model: Type[ReadModel]
    logged_fields: Sequence[str] = ()

    def __init__(self, db: Database, settings: Settings):
        self.db = db
        self.settings = settings
        self.logger = logging.getLogger(type(self).__module__)

    # -- helpers -----------------------------------------------------------

    def _to_model(self, row: Any) -> ReadModel:
        return self.read_model.model_validate(dict(row))

    def _fetch_row(self, record_id: str):
        return self.db.fetchone(f"SELECT * FROM {self.table} WHERE id = ?", (record_id,))

    def _not_found(self) -> NotFound:
        return NotFound(f"{self.noun.capitalize()} not found")

    def _filter_clauses(self, status: Optional[str], **filters: Any) -> Tuple[List[str], List[Any]]:
        """Build WHERE clauses for a listing; subclasses add their own filters."""
        clauses: List[str] = []
        params: List[Any] = []
        if status:
            clauses.append("status = ?")
            params.append(status)
        return clauses, params

    def resolve_limit(self, limit: Optional[int]) -> int:
        """Apply the default page size and the configured upper bound."""
        if limit is None:
            limit = self.settings.default_page_size
        if limit < 1:
            raise ValidationFailed(["limit must be at least 1"])
        return min(limit, self.settings.max_page_size)

    # -- operations ----------------------------------------------------------

    def create(self, payload: Mapping[str, Any]) -> ReadModel:
        """Validate and store a submission.

        Raises ``ValidationFailed`` listing every violation; nothing is
        written in that case.
        """
        clean, errors = validate_record(self.rules, payload)
        if errors:
            self.logger.info("Rejected %s submission: %s", self.noun, "; ".join(errors))
            raise ValidationFailed(errors)

        self.logger.info(
            "New %s received: %s",
            self.noun,
            ", ".join(f"{name}={clean.get(name) or 'None'}" for name in self.logged_fields),
        )
        timestamp = to_timestamp(utc_now())
        record = {"id": new_id(), **clean}
        record.setdefault("status", self.status_rule.default)
        record.update(submitted_at=timestamp, created_at=timestamp, updated_at=timestamp)

        columns = ", ".join(record)
        placeholders = ", ".join("?" for _ in record)
        with self.db.transaction() as cursor:
            cursor.execute(
                f"INSERT INTO {self.table} ({columns}) VALUES ({placeholders})",
                tuple(record.values()),
            )
        self.logger.info("%s saved with ID %s", self.noun.capitalize(), record["id"])
        return self._to_model(record)

    def list(
        self,
        status: Optional[str] = None,
        page: int = 1,
        limit: Optional[int] = None,
        **filters: Any,
    ) -> Page[ReadModel]:
        """Return one page of records, newest submission first."""
        if page < 1:
            raise ValidationFailed(["page must be at least 1"])
        limit = self.resolve_limit(limit)
        clauses, params = self._filter_clauses(status, **filters)
        where = f" WHERE {' AND '.join(clauses)}" if clauses else ""

        total_row = self.db.fetchone(f"SELECT COUNT(*) AS total FROM {self.table}{where}", tuple(params))
        total = total_row["total"] if total_row else 0
        rows = self.db.fetchall(
            f"SELECT * FROM {self.table}{where} "
            "ORDER BY submitted_at DESC, rowid DESC LIMIT ? OFFSET ?",
            tuple(params) + (limit, (page - 1) * limit),
        )
        self.logger.info("Retrieved %s %s records (total %s)", len(rows), self.noun, total)
        return Page(items=[self._to_model(row) for row in rows], total=total, page=page, limit=limit)

    def get(self, record_id: str) -> ReadModel:
        row = self._fetch_row(record_id)
        if row is None:
            raise self._not_found()
        return self._to_model(row)

    def update_status(self, record_id: str, status: Any) -> ReadModel:
        """Set a new status.

        The value is checked against the status set before the record is
        looked up, so an invalid value never reaches storage.
        """
        error = validate_choice(self.status_rule, status)
        if error:
            raise ValidationFailed([error])

        with self.db.transaction() as cursor:
            cursor.execute(
                f"UPDATE {self.table} SET status = ?, updated_at = ? WHERE id = ?",
                (status, to_timestamp(utc_now()), record_id),
            )
            updated = cursor.rowcount
        if not updated:
            raise self._not_found()
        self.logger.info("%s %s status updated to: %s", self.noun.capitalize(), record_id, status)
        return self.get(record_id)

    def delete(self, record_id: str) -> None:
        with self.db.transaction() as cursor:
            cursor.execute(f"DELETE FROM {self.table} WHERE id = ?", (record_id,))
            deleted = cursor.rowcount
        if not deleted:
            raise self._not_found()
        self.logger.info("%s %s deleted", self.noun.capitalize(), record_id)
