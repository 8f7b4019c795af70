"""Field checks used by the declarative rule sets.

Every check is a small frozen dataclass called as ``check(value, ctx)``.
It returns the (possibly converted) value or raises ``RuleViolation``.
Syntactic checks look at the value alone; cross-field checks read sibling
values from the submitted payload; semantic checks query the store through
``ctx.db``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Optional, Tuple

from email_validator import EmailNotValidError, validate_email
from pydantic import AnyHttpUrl, TypeAdapter, ValidationError
from sqlalchemy import func

from shopcart.models.category import Category

INVALID = "invalid"
CONFLICT = "conflict"
REFERENCE = "reference"

_TRUE_STRINGS = {"true", "1"}
_FALSE_STRINGS = {"false", "0"}
_url_adapter = TypeAdapter(AnyHttpUrl)

# Largest value an INTEGER column holds (SQLite and PostgreSQL BIGINT)
MAX_INT = 2**63 - 1


class RuleViolation(Exception):
    def __init__(self, message: str, kind: str = INVALID):
        super().__init__(message)
        self.message = message
        self.kind = kind


@dataclass(frozen=True)
class Check:
    message: str

    def __call__(self, value: Any, ctx) -> Any:
        raise NotImplementedError

    def fail(self):
        raise RuleViolation(self.message)


# ---------------------------------------------------------------------------
# Conversions
# ---------------------------------------------------------------------------

def to_decimal(value: Any) -> Optional[Decimal]:
    """Parse an int, float or numeric string; None when it isn't a number."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, (int, float)):
        value = str(value)
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        parsed = Decimal(value.strip())
    except InvalidOperation:
        return None
    return parsed if parsed.is_finite() else None


def to_date(value: Any) -> Optional[date]:
    """Parse an ISO 8601 date or datetime string into a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None


# ---------------------------------------------------------------------------
# Syntactic checks
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class IsInt(Check):
    min: Optional[int] = None
    max: Optional[int] = None

    def __call__(self, value, ctx):
        if isinstance(value, bool):
            self.fail()
        if isinstance(value, str) and re.fullmatch(r"[+-]?\d+", value.strip()):
            value = int(value.strip())
        if not isinstance(value, int):
            self.fail()
        if not -MAX_INT - 1 <= value <= MAX_INT:
            self.fail()
        if self.min is not None and value < self.min:
            self.fail()
        if self.max is not None and value > self.max:
            self.fail()
        return value


@dataclass(frozen=True)
class IsBool(Check):
    def __call__(self, value, ctx):
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in _TRUE_STRINGS:
                return True
            if lowered in _FALSE_STRINGS:
                return False
        self.fail()


@dataclass(frozen=True)
class IsDecimal(Check):
    """Numeric value with at most ``places`` fractional digits.

    ``digits`` is the total precision of the target column, as in
    ``Numeric(digits, places)``; larger magnitudes are rejected.
    """

    places: Optional[int] = None
    digits: Optional[int] = None

    def __call__(self, value, ctx):
        parsed = to_decimal(value)
        if parsed is None:
            self.fail()
        if self.places is not None and -parsed.as_tuple().exponent > self.places:
            self.fail()
        if self.digits is not None and abs(parsed) >= Decimal(10) ** (self.digits - (self.places or 0)):
            self.fail()
        return parsed


@dataclass(frozen=True)
class NonNegative(Check):
    def __call__(self, value, ctx):
        if value is not None and value < 0:
            self.fail()
        return value


@dataclass(frozen=True)
class IsString(Check):
    def __call__(self, value, ctx):
        if not isinstance(value, str):
            self.fail()
        return value


@dataclass(frozen=True)
class NotEmpty(Check):
    def __call__(self, value, ctx):
        if not isinstance(value, str) or not value:
            self.fail()
        return value


@dataclass(frozen=True)
class Length(Check):
    min: int = 0
    max: Optional[int] = None

    def __call__(self, value, ctx):
        if not isinstance(value, str):
            self.fail()
        if len(value) < self.min or (self.max is not None and len(value) > self.max):
            self.fail()
        return value


@dataclass(frozen=True)
class Matches(Check):
    pattern: str = ""

    def __call__(self, value, ctx):
        if not isinstance(value, str) or not re.search(self.pattern, value):
            self.fail()
        return value


@dataclass(frozen=True)
class OneOf(Check):
    choices: Tuple[str, ...] = ()

    def __call__(self, value, ctx):
        if value not in self.choices:
            self.fail()
        return value


@dataclass(frozen=True)
class IsEmail(Check):
    """Syntactic email check; the address is returned lower-cased."""

    def __call__(self, value, ctx):
        if not isinstance(value, str):
            self.fail()
        try:
            result = validate_email(value, check_deliverability=False)
        except EmailNotValidError:
            self.fail()
        return result.normalized.lower()


@dataclass(frozen=True)
class IsUrl(Check):
    def __call__(self, value, ctx):
        if not isinstance(value, str):
            self.fail()
        try:
            _url_adapter.validate_python(value)
        except ValidationError:
            self.fail()
        return value


@dataclass(frozen=True)
class IsIsoDate(Check):
    def __call__(self, value, ctx):
        parsed = to_date(value)
        if parsed is None:
            self.fail()
        return parsed


@dataclass(frozen=True)
class NotInPast(Check):
    def __call__(self, value, ctx):
        if value is not None and value < date.today():
            self.fail()
        return value


# ---------------------------------------------------------------------------
# Cross-field checks (siblings come from the submitted payload)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CompareWith(Check):
    """Compare the value against a sibling field of the same payload.

    The sibling is parsed with ``parse``; when it is absent, null or
    unparsable the check passes (the sibling's own rule reports it).
    ``holds(value, other)`` must be true for the payload to be accepted.
    """

    other: str = ""
    holds: Callable[[Any, Any], bool] = field(default=lambda a, b: True, compare=False)
    parse: Callable[[Any], Any] = field(default=lambda v: v, compare=False)

    def __call__(self, value, ctx):
        if value is None:
            return value
        other = self.parse(ctx.payload.get(self.other))
        if other is not None and not self.holds(value, other):
            self.fail()
        return value


def not_greater_than(message: str, other: str) -> CompareWith:
    return CompareWith(message, other=other, holds=lambda a, b: a <= b, parse=to_decimal)


def not_less_than(message: str, other: str) -> CompareWith:
    return CompareWith(message, other=other, holds=lambda a, b: a >= b, parse=to_decimal)


def before_date(message: str, other: str) -> CompareWith:
    return CompareWith(message, other=other, holds=lambda a, b: a < b, parse=to_date)


def after_date(message: str, other: str) -> CompareWith:
    return CompareWith(message, other=other, holds=lambda a, b: a > b, parse=to_date)


def equals_field(message: str, other: str) -> CompareWith:
    return CompareWith(message, other=other, holds=lambda a, b: a == b)


# ---------------------------------------------------------------------------
# Semantic checks (read the store)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Unique(Check):
    """No other row (soft-deleted ones included) holds this value.

    ``scope`` narrows the comparison to rows matching extra column values,
    e.g. ``(("account_type", AccountType.admin),)``. The record being
    updated (``ctx.target_id``) is excluded.
    """

    model: Any = None
    column: str = ""
    scope: Tuple[Tuple[str, Any], ...] = ()
    case_insensitive: bool = False

    def __call__(self, value, ctx):
        column = getattr(self.model, self.column)
        if self.case_insensitive:
            query = ctx.db.query(self.model.id).filter(func.lower(column) == value.lower())
        else:
            query = ctx.db.query(self.model.id).filter(column == value)
        for attr, scoped_value in self.scope:
            query = query.filter(getattr(self.model, attr) == scoped_value)
        if ctx.target_id is not None:
            query = query.filter(self.model.id != ctx.target_id)
        if query.first() is not None:
            raise RuleViolation(self.message, CONFLICT)
        return value


@dataclass(frozen=True)
class ActiveCategory(Check):
    """The id references a live, active category."""

    def __call__(self, value, ctx):
        found = (
            ctx.db.query(Category.id)
            .filter(Category.id == value, Category.is_active.is_(True), Category.not_deleted())
            .first()
        )
        if found is None:
            raise RuleViolation(self.message, REFERENCE)
        return value


@dataclass(frozen=True)
class Upper(Check):
    """Normalise to upper case (never fails)."""

    message: str = ""

    def __call__(self, value, ctx):
        return value.upper() if isinstance(value, str) else value
