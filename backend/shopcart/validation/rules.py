"""Declarative rule sets and the generic executor that runs them.

A ``RuleSet`` lists the ``FieldRule`` entries for each operation of a
resource. The ``update`` rules are never written by hand: they are the
``create`` rules demoted to optional, so create and update can't drift.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from sqlalchemy.orm import Session

from shopcart.core.errors import ConflictError, InvalidReferenceError, ValidationFailure
from shopcart.validation.checks import CONFLICT, INVALID, REFERENCE, Check, RuleViolation

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def to_snake(name: str) -> str:
    """``categoryId`` -> ``category_id``"""
    return _CAMEL_BOUNDARY.sub("_", name).lower()


@dataclass
class ValidationContext:
    db: Session
    payload: Mapping[str, Any]
    target_id: Optional[int] = None


@dataclass(frozen=True)
class FieldRule:
    """Ordered checks for one submitted field.

    Absent optional fields pass untouched. ``nullable`` lets an explicit
    null through (used to clear optional columns). String values are
    stripped first when ``trim`` is set.
    """

    field: str
    checks: Tuple[Check, ...] = ()
    required: bool = False
    required_message: Optional[str] = None
    nullable: bool = False
    trim: bool = True
    attr: Optional[str] = None

    @property
    def target(self) -> str:
        return self.attr or to_snake(self.field)

    def optional(self) -> "FieldRule":
        return replace(self, required=False)

    @property
    def missing_message(self) -> str:
        return self.required_message or f"{self.field} is required"


@dataclass(frozen=True)
class RuleSet:
    resource: str
    create: Tuple[FieldRule, ...]
    list_query: Tuple[FieldRule, ...] = ()
    update_only: Tuple[FieldRule, ...] = ()
    operations: Mapping[str, Tuple[FieldRule, ...]] = field(default_factory=dict)

    @property
    def update(self) -> Tuple[FieldRule, ...]:
        return tuple(rule.optional() for rule in self.create) + self.update_only

    def rules_for(self, operation: str) -> Tuple[FieldRule, ...]:
        if operation == "create":
            return self.create
        if operation == "update":
            return self.update
        if operation == "list":
            return self.list_query
        try:
            return self.operations[operation]
        except KeyError:
            raise ValueError(f"No rules for {self.resource}.{operation}") from None


def run_rules(
    rules: Sequence[FieldRule],
    payload: Mapping[str, Any],
    ctx: ValidationContext,
) -> Dict[str, Any]:
    """Validate ``payload`` and return the cleaned values keyed by model attribute.

    Checks for one field stop at its first failure; failures of different
    fields accumulate. Nothing is returned unless every rule passes. When all
    failures are uniqueness (or all are reference) violations the more
    specific error type is raised.
    """
    violations: List[Tuple[str, str, str]] = []
    cleaned: Dict[str, Any] = {}

    for rule in rules:
        if rule.field not in payload:
            if rule.required:
                violations.append((rule.field, rule.missing_message, INVALID))
            continue

        value = payload[rule.field]
        if value is None:
            if rule.nullable:
                cleaned[rule.target] = None
            else:
                violations.append((rule.field, rule.missing_message, INVALID))
            continue

        if rule.trim and isinstance(value, str):
            value = value.strip()

        try:
            for check in rule.checks:
                value = check(value, ctx)
        except RuleViolation as violation:
            violations.append((rule.field, violation.message, violation.kind))
            continue
        cleaned[rule.target] = value

    if violations:
        errors = [(name, message) for name, message, _ in violations]
        kinds = {kind for _, _, kind in violations}
        if kinds == {CONFLICT}:
            raise ConflictError(errors=errors)
        if kinds == {REFERENCE}:
            raise InvalidReferenceError(errors=errors)
        raise ValidationFailure(errors=errors)
    return cleaned


def validate(
    ruleset: RuleSet,
    operation: str,
    payload: Mapping[str, Any],
    db: Session,
    target_id: Optional[int] = None,
) -> Dict[str, Any]:
    """Run the rules of ``ruleset`` registered for ``operation``."""
    if not isinstance(payload, Mapping):
        raise ValidationFailure(errors=[("body", "Request body must be a JSON object")])
    ctx = ValidationContext(db=db, payload=payload, target_id=target_id)
    return run_rules(ruleset.rules_for(operation), payload, ctx)
