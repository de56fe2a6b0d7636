"""Field validators for the resume wizard.

Every check is a pure function returning ``None`` when the value is valid and
a human readable message otherwise. Only ``required`` (and
``conditional_required``) treat an empty value as a failure; the remaining
checks pass on empty input so that a field reports "is required" before it
reports anything about format.

``FieldRule`` wraps a check together with its arguments so that a field can
declare an ordered list of rules; ``first_error`` evaluates them in order and
returns the first failure.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Callable, Mapping, Sequence

from resume_builder.core.config import settings

MONTHS: tuple[str, ...] = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

EMAIL_RE = re.compile(r"^[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}$", re.IGNORECASE)
PHONE_RE = re.compile(r"^[0-9]{10}$")
LINKEDIN_RE = re.compile(r"^(https?://)?([\w\d]+\.)?linkedin\.com/.+", re.IGNORECASE)
GITHUB_RE = re.compile(r"^(https?://)?([\w\d]+\.)?github\.com/.+", re.IGNORECASE)

_TAG_RE = re.compile(r"<[^>]*>")

Record = Mapping[str, Any]


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict, set)):
        return not value
    return False


def strip_tags(value: str) -> str:
    return _TAG_RE.sub("", value or "").strip()


def parse_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value or "").strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def required(value: Any, message: str = "This field is required") -> str | None:
    return message if is_blank(value) else None


def min_length(value: Any, n: int, message: str | None = None) -> str | None:
    if is_blank(value):
        return None
    if len(str(value)) < n:
        return message or f"Must be at least {n} characters"
    return None


def pattern(value: Any, regex: re.Pattern[str] | str, message: str = "Invalid format") -> str | None:
    if is_blank(value):
        return None
    compiled = re.compile(regex) if isinstance(regex, str) else regex
    return None if compiled.match(str(value).strip()) else message


def rich_text_non_empty(value: Any, message: str = "This field is required") -> str | None:
    if value is None:
        return message
    return None if strip_tags(str(value)) else message


def year_bounds(today: date | None = None) -> tuple[int, int]:
    current = (today or date.today()).year
    return settings.education_min_year, current + settings.education_year_horizon


def valid_year(value: Any, message: str = "Please select a valid year", *, today: date | None = None) -> str | None:
    if is_blank(value):
        return None
    if isinstance(value, bool):
        return message
    try:
        year = int(str(value).strip())
    except ValueError:
        return message
    low, high = year_bounds(today)
    return None if low <= year <= high else message


def valid_month(value: Any, message: str = "Please select a valid month") -> str | None:
    if is_blank(value):
        return None
    return None if value in MONTHS else message


def valid_date(value: Any, message: str = "Please enter a valid date") -> str | None:
    if is_blank(value):
        return None
    return None if parse_date(value) is not None else message


def date_ordering(
    start: Any,
    end: Any,
    message: str = "End date must be after start date",
    *,
    present: bool = False,
) -> str | None:
    if present:
        return None
    start_date = parse_date(start)
    end_date = parse_date(end)
    if start_date is None or end_date is None:
        return None
    return None if end_date >= start_date else message


@dataclass(frozen=True)
class FieldRule:
    """One check bound to its arguments.

    ``check`` receives the field value and the record the field belongs to
    (the entry for group fields, the whole form for scalar fields).
    """

    check: Callable[[Any, Record], str | None]
    name: str = field(default="rule")

    def __call__(self, value: Any, record: Record) -> str | None:
        return self.check(value, record)


def rule(fn: Callable[..., str | None], *args: Any, **kwargs: Any) -> FieldRule:
    return FieldRule(lambda value, _record: fn(value, *args, **kwargs), name=fn.__name__)


def conditional_required(predicate: Callable[[Record], bool], message: str) -> FieldRule:
    def check(value: Any, record: Record) -> str | None:
        if not predicate(record):
            return None
        return required(value, message)

    return FieldRule(check, name="conditional_required")


def when(predicate: Callable[[Record], bool], inner: FieldRule) -> FieldRule:
    def check(value: Any, record: Record) -> str | None:
        return inner(value, record) if predicate(record) else None

    return FieldRule(check, name=f"when_{inner.name}")


def ordered_after(start_field: str, message: str, *, present_field: str | None = None) -> FieldRule:
    def check(value: Any, record: Record) -> str | None:
        present = bool(record.get(present_field)) if present_field else False
        return date_ordering(record.get(start_field), value, message, present=present)

    return FieldRule(check, name="date_ordering")


def first_error(value: Any, record: Record, rules: Sequence[FieldRule]) -> str | None:
    for current in rules:
        error = current(value, record)
        if error:
            return error
    return None
