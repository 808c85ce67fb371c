"""Field-level validation for profile requests.

Each request type declares a table of ``field -> rule tags``. Rules are
checked in order and the first failing rule for a field produces its
message. Validation is pure: no I/O, no mutation.
"""

import re
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

PHONE_PATTERN = re.compile(r"\+?[1-9]\d{1,14}", re.ASCII)
DATE_FORMAT = "%Y-%m-%d"
_DATE_SHAPE = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)


def _required(value: Any) -> bool:
    return isinstance(value, str) and value != ""


def _date(value: Any) -> bool:
    if not value:
        return True  # optional field
    if not isinstance(value, str) or not _DATE_SHAPE.fullmatch(value):
        return False
    try:
        datetime.strptime(value, DATE_FORMAT)
    except ValueError:
        return False
    return True


def _phone(value: Any) -> bool:
    if not value:
        return True  # optional field
    return isinstance(value, str) and PHONE_PATTERN.fullmatch(value) is not None


RULES: dict[str, Callable[[Any], bool]] = {
    "required": _required,
    "date": _date,
    "phone": _phone,
}


def format_violation(field: str, tag: str) -> str:
    """Human-readable message for a failed rule."""
    if tag == "required":
        return f"{field} is required"
    if tag == "date":
        return f"{field} must be a valid date in YYYY-MM-DD format"
    if tag == "phone":
        return f"{field} must be a valid phone number"
    return f"{field} failed {tag} validation"


def validate_fields(
    record: Any, field_rules: Mapping[str, tuple[str, ...]]
) -> dict[str, str]:
    """Check ``record`` attributes against ``field_rules``.

    Returns a mapping of field name to message; empty when valid. A tag with
    no registered rule always fails with the generic message.
    """
    violations: dict[str, str] = {}
    for field, tags in field_rules.items():
        value = getattr(record, field, None)
        for tag in tags:
            rule = RULES.get(tag)
            if rule is None or not rule(value):
                violations[field] = format_violation(field, tag)
                break
    return violations


def validate(record: Any) -> dict[str, str]:
    """Validate a request object that declares ``FIELD_RULES``."""
    return validate_fields(record, type(record).FIELD_RULES)
