"""Declarative request validation rules.

A route declares an ordered list of rules. Each rule locates one field (a
path parameter or a JSON body field) and chains checks, each with its own
message. All rules are evaluated; when any check fails the request is
rejected with a ``ValidationError`` listing every failure, before the
handler or its database session are created.

Checks coerce the raw value to text first, so ``300``, ``300.0`` and
``"300"`` are all numeric while ``true`` is not.

Example:
    router.post(
        "/",
        dependencies=[Depends(validate_request(body("name").not_empty("Required")))],
    )
"""

import re
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field, replace
from typing import Any, Final, Literal

from fastapi import Request
from loguru import logger

from src.api.schemas.errors import FieldError
from src.core.exceptions import ValidationError

type Location = Literal["params", "body"]
type Predicate = Callable[[Any], bool]

INT_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[-+]?[0-9]+$")
NUMERIC_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[+-]?([0-9]*[.])?[0-9]+$")
BOOLEAN_STRINGS: Final[frozenset[str]] = frozenset({"true", "false", "1", "0"})


def as_text(value: object) -> str:
    """Render a raw request value as text for string-based checks.

    Missing and null values become the empty string, booleans are lower-case
    and integral floats drop their fractional part.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def is_int(value: object) -> bool:
    """Whether the value is an integer literal."""
    return INT_PATTERN.match(as_text(value)) is not None


def is_numeric(value: object) -> bool:
    """Whether the value is a decimal number literal."""
    return NUMERIC_PATTERN.match(as_text(value)) is not None


def is_boolean(value: object) -> bool:
    """Whether the value is a boolean or one of its text forms."""
    return as_text(value) in BOOLEAN_STRINGS


def is_not_empty(value: object) -> bool:
    """Whether the value renders to non-empty text."""
    return as_text(value) != ""


def is_positive(value: object) -> bool:
    """Whether the value is a number strictly greater than zero."""
    if isinstance(value, bool):
        return False
    try:
        return float(str(value)) > 0
    except (TypeError, ValueError, OverflowError):
        return False


@dataclass(frozen=True, slots=True)
class Check:
    """A predicate paired with the message reported when it fails."""

    predicate: Predicate
    message: str


@dataclass(frozen=True, slots=True)
class ValidationRule:
    """Checks applied, in order, to one request field.

    Rules are immutable; every chaining method returns a new rule.
    """

    location: Location
    name: str
    checks: tuple[Check, ...] = field(default_factory=tuple)

    def custom(self, predicate: Predicate, message: str) -> "ValidationRule":
        """Append an arbitrary check."""
        return replace(self, checks=(*self.checks, Check(predicate, message)))

    def is_int(self, message: str) -> "ValidationRule":
        """Require an integer literal."""
        return self.custom(is_int, message)

    def is_numeric(self, message: str) -> "ValidationRule":
        """Require a decimal number literal."""
        return self.custom(is_numeric, message)

    def is_boolean(self, message: str) -> "ValidationRule":
        """Require a boolean."""
        return self.custom(is_boolean, message)

    def not_empty(self, message: str) -> "ValidationRule":
        """Require a present, non-empty value."""
        return self.custom(is_not_empty, message)

    def evaluate(self, value: object) -> list[FieldError]:
        """Run every check against ``value`` and report the failing ones."""
        return [
            FieldError(
                value=value,
                msg=check.message,
                path=self.name,
                location=self.location,
            )
            for check in self.checks
            if not check.predicate(value)
        ]


def param(name: str) -> ValidationRule:
    """Start a rule for a path parameter."""
    return ValidationRule(location="params", name=name)


def body(name: str) -> ValidationRule:
    """Start a rule for a JSON body field."""
    return ValidationRule(location="body", name=name)


async def _read_json_object(request: Request) -> dict[str, Any]:
    """Return the JSON body when it is an object, otherwise an empty dict."""
    try:
        payload = await request.json()
    except ValueError:
        return {}
    return payload if isinstance(payload, dict) else {}


async def collect_errors(
    request: Request, rules: Sequence[ValidationRule]
) -> list[FieldError]:
    """Evaluate ``rules`` against ``request`` and gather every failure.

    Args:
        request: The incoming request.
        rules: Rules in evaluation order.

    Returns:
        list[FieldError]: Failures in rule order, empty when the request is valid.
    """
    payload: dict[str, Any] = {}
    if any(rule.location == "body" for rule in rules):
        payload = await _read_json_object(request)

    errors: list[FieldError] = []
    for rule in rules:
        source = request.path_params if rule.location == "params" else payload
        errors.extend(rule.evaluate(source.get(rule.name)))
    return errors


def validate_request(
    *rules: ValidationRule,
) -> Callable[[Request], Awaitable[None]]:
    """Build a FastAPI dependency that enforces ``rules``.

    Args:
        *rules: Rules in evaluation order.

    Returns:
        Callable[[Request], Awaitable[None]]: Dependency raising
            ``ValidationError`` when any rule fails.
    """

    async def run_validation_rules(request: Request) -> None:
        errors = await collect_errors(request, rules)
        if not errors:
            return

        logger.warning(
            "Request validation failed with {} error(s)",
            len(errors),
            failed_fields=sorted({error.path for error in errors}),
        )
        raise ValidationError(
            "Request validation failed",
            errors=[error.model_dump(mode="json") for error in errors],
        )

    return run_validation_rules
