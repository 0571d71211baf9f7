"""
Table-driven field validation for submitted records.

Each record type declares a tuple of ``FieldRule`` entries.
``validate_record`` checks every rule against an untyped payload and
collects all violations instead of stopping at the first one, so a
client can fix a form in a single round trip.  Rules are field-local;
there are no cross-field checks.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional, Pattern, Sequence, Tuple

EMAIL_PATTERN = re.compile(r"^\S+@\S+\.\S+$")

TEXT = "text"
DATE = "date"


@dataclass(frozen=True)
class FieldRule:
    """Validation rule for a single payload field.

    ``name`` is the key in the request payload, ``column`` the storage
    column it is written to and ``label`` the wording used in error
    messages.  ``choices`` restricts the value to a fixed set and
    ``choice_label`` names that set in the rejection message.
    """

    name: str
    column: str
    label: str
    required: bool = True
    kind: str = TEXT
    min_length: Optional[int] = None
    choices: Optional[Sequence[str]] = None
    choice_label: Optional[str] = None
    pattern: Optional[Pattern[str]] = None
    pattern_message: Optional[str] = None
    lowercase: bool = False
    default: Optional[str] = None
    required_message: Optional[str] = None
    min_length_message: Optional[str] = None

    @property
    def missing_message(self) -> str:
        return self.required_message or f"{self.label} is required"

    @property
    def too_short_message(self) -> str:
        return self.min_length_message or f"{self.label} must be at least {self.min_length} characters"


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _parse_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        # Browsers usually send a full ISO timestamp; keep the calendar day.
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def validate_choice(rule: FieldRule, value: Any) -> Optional[str]:
    """Return the error message for ``value`` or ``None`` when it is allowed."""
    if _is_blank(value):
        return rule.missing_message
    if not isinstance(value, str) or value not in (rule.choices or ()):
        return f"`{value}` is not a valid {rule.choice_label or rule.label.lower()}"
    return None


def _check(rule: FieldRule, value: Any) -> Tuple[Any, Optional[str]]:
    """Validate one field and return its cleaned value and error."""
    if _is_blank(value):
        if rule.default is not None:
            return rule.default, None
        if rule.required:
            return None, rule.missing_message
        return None, None

    if rule.kind == DATE:
        parsed = _parse_date(value)
        if parsed is None:
            return None, f"{rule.label} must be a valid date"
        return parsed.isoformat(), None

    if not isinstance(value, str):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None, f"{rule.label} must be text"
        value = str(value)

    value = value.strip()
    if rule.lowercase:
        value = value.lower()
    if rule.choices is not None:
        return value, validate_choice(rule, value)
    if rule.min_length is not None and len(value) < rule.min_length:
        return value, rule.too_short_message
    if rule.pattern is not None and not rule.pattern.match(value):
        return value, rule.pattern_message or f"{rule.label} is invalid"
    return value, None


def validate_record(
    rules: Sequence[FieldRule], payload: Mapping[str, Any]
) -> Tuple[Dict[str, Any], List[str]]:
    """Validate ``payload`` against ``rules``.

    Returns a mapping of storage column to cleaned value and the list
    of every violation found.  Keys not named by a rule are ignored.
    The mapping is only meaningful when the error list is empty.
    """
    if not isinstance(payload, Mapping):
        return {}, ["Request body must be a JSON object"]
    clean: Dict[str, Any] = {}
    errors: List[str] = []
    for rule in rules:
        value, error = _check(rule, payload.get(rule.name))
        if error:
            errors.append(error)
            continue
        if value is not None:
            clean[rule.column] = value
    return clean, errors
