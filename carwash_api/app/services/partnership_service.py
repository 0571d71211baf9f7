"""
Business logic for franchise partnership applications.

Listing supports a ``city`` filter in addition to ``status``: the
filter is a case-insensitive substring match, so ``mum`` finds
applications from ``Mumbai``.  The filter value is matched literally;
it is not interpreted as a pattern.
"""

from typing import Any, List, Optional, Tuple

from carwash_api.app.schemas.partnership import (
    LOGGED_FIELDS,
    PARTNERSHIP_RULES,
    STATUS_RULE,
    PartnershipRead,
)
from carwash_api.app.services.record_service import RecordService


class PartnershipService(RecordService[PartnershipRead]):
    """Service for managing partnership applications."""

    table = "partnerships"
    noun = "partnership application"
    rules = PARTNERSHIP_RULES
    status_rule = STATUS_RULE
    read_model = PartnershipRead
    logged_fields = LOGGED_FIELDS

    def _filter_clauses(
        self, status: Optional[str], city: Optional[str] = None, **filters: Any
    ) -> Tuple[List[str], List[Any]]:
        clauses, params = super()._filter_clauses(status, **filters)
        if city and city.strip():
            clauses.append("instr(casefold(city), ?) > 0")
            params.append(city.strip().casefold())
        return clauses, params
