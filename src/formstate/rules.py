"""Built-in validation rules.

A rule is any callable with the signature::

    def rule(value: V) -> FieldResult:
        '''Success, FieldError(message), or NoInput.'''

Every built-in is a factory returning a rule, so messages and options
can be overridden per use::

    def min_length(n: int, message: str | None = None) -> ValidationRule[str | None]:
        def check(value: str | None) -> FieldResult:
            ...
        return check

Absence is handled centrally by the field's required gate, so a field
never passes ``None`` to its validators. Used standalone, the built-ins
answer ``NoInput`` for ``None`` (and for NaN in the numeric rules),
meaning "not yet assessable" rather than an error. ``required()`` is the
exception: absence is exactly what it checks.

Custom rules follow the same protocol. Any ``(value) -> FieldResult``
callable works with ``Form.register_field()``.
"""

import math
import re
from collections.abc import Callable, Sized
from typing import Any

from formstate.errors import ConfigurationError
from formstate.results import NO_INPUT, SUCCESS, FieldError, FieldResult

# Type alias for a validation rule
type ValidationRule[V] = Callable[[V], FieldResult]

type Number = int | float


# ---------------------------------------------------------------------------
# Composition
# ---------------------------------------------------------------------------


def validate_only_if[V](active: Callable[[], bool], rule: ValidationRule[V]) -> ValidationRule[V]:
    """Run *rule* only while ``active()`` is true; otherwise succeed.

    *active* is evaluated at validation time, not at construction.
    """

    def check(value: V) -> FieldResult:
        if active():
            return rule(value)
        return SUCCESS

    return check


# ---------------------------------------------------------------------------
# Presence
# ---------------------------------------------------------------------------


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, Sized):
        return len(value) == 0
    return False


def required(
    message: str = "Field is required",
    is_empty: Callable[[Any], bool] = _is_empty,
) -> ValidationRule[Any]:
    """Value must be present: not ``None``, not blank, not an empty collection.

    Pass *is_empty* to redefine emptiness (``lambda v: v is None or v <= 0``).
    """

    def check(value: Any) -> FieldResult:
        if is_empty(value):
            return FieldError(message)
        return SUCCESS

    return check


def not_empty(message: str = "This field cannot be empty.") -> ValidationRule[str | None]:
    """String must contain at least one character (whitespace counts)."""

    def check(value: str | None) -> FieldResult:
        if value is None:
            return NO_INPUT
        return SUCCESS if value else FieldError(message)

    return check


def not_blank(message: str = "This field cannot be blank.") -> ValidationRule[str | None]:
    """String must contain at least one non-whitespace character."""

    def check(value: str | None) -> FieldResult:
        if value is None:
            return NO_INPUT
        return SUCCESS if value.strip() else FieldError(message)

    return check


def checked(message: str = "Must be checked") -> ValidationRule[bool | None]:
    """Boolean must be ``True`` (terms-of-service checkboxes)."""

    def check(value: bool | None) -> FieldResult:
        if value is None:
            return NO_INPUT
        return SUCCESS if value else FieldError(message)

    return check


# ---------------------------------------------------------------------------
# Length
# ---------------------------------------------------------------------------


def min_length(n: int, message: str | None = None) -> ValidationRule[str | None]:
    """String must be at least *n* characters."""
    if n < 0:
        msg = f"min_length must be >= 0, got {n}"
        raise ConfigurationError(msg)
    text = f"Must be at least {n} characters long." if message is None else message

    def check(value: str | None) -> FieldResult:
        if value is None:
            return NO_INPUT
        return SUCCESS if len(value) >= n else FieldError(text)

    return check


def max_length(n: int, message: str | None = None) -> ValidationRule[str | None]:
    """String must be at most *n* characters."""
    if n < 0:
        msg = f"max_length must be >= 0, got {n}"
        raise ConfigurationError(msg)
    text = f"Must not exceed {n} characters." if message is None else message

    def check(value: str | None) -> FieldResult:
        if value is None:
            return NO_INPUT
        return SUCCESS if len(value) <= n else FieldError(text)

    return check


# ---------------------------------------------------------------------------
# Format
# ---------------------------------------------------------------------------

# Structure check only: local part, then dot-separated host labels
EMAIL_PATTERN = re.compile(
    r"[a-zA-Z0-9+._%\-]{1,256}@[a-zA-Z0-9][a-zA-Z0-9\-]{0,64}(\.[a-zA-Z0-9][a-zA-Z0-9\-]{0,25})+"
)

HTTP_URL_PATTERN = re.compile(
    r"https?://(?:www\.)?[-a-zA-Z0-9@:%._+~#=]{1,256}\.[a-zA-Z0-9()]{1,6}\b[-a-zA-Z0-9()@:%_+.~#?&/=]*"
)
DOMAIN_URL_PATTERN = re.compile(
    r"[-a-zA-Z0-9@:%._+~#=]{1,256}\.[a-zA-Z0-9()]{1,6}\b[-a-zA-Z0-9()@:%_+.~#?&/=]*"
)

SPECIAL_CHARACTERS = frozenset("!@#$%^&*()-_=+[]{};:'\",.<>?/|\\`~")


def email(
    message: str = "Must be a valid email address.",
    pattern: re.Pattern[str] | str = EMAIL_PATTERN,
) -> ValidationRule[str | None]:
    """Value must look like an email address (structure, not deliverability)."""
    compiled = re.compile(pattern)

    def check(value: str | None) -> FieldResult:
        if value is None:
            return NO_INPUT
        return SUCCESS if compiled.fullmatch(value) else FieldError(message)

    return check


def url(protocol_required: bool = False, message: str = "Must be a valid URL.") -> ValidationRule[str | None]:
    """Value must be an http(s) URL, or a bare domain unless *protocol_required*."""

    def check(value: str | None) -> FieldResult:
        if value is None:
            return NO_INPUT
        ok = HTTP_URL_PATTERN.fullmatch(value) is not None
        if not ok and not protocol_required:
            ok = DOMAIN_URL_PATTERN.fullmatch(value) is not None
        return SUCCESS if ok else FieldError(message)

    return check


def strong_password(
    min_length: int = 8,
    length_message: str | None = None,
    uppercase_message: str = "Password must contain at least one uppercase letter.",
    lowercase_message: str = "Password must contain at least one lowercase letter.",
    digit_message: str = "Password must contain at least one digit.",
    special_character_message: str = "Password must contain at least one special character.",
) -> ValidationRule[str | None]:
    """Password strength: length, upper, lower, digit, special; the first failure wins."""
    length_text = length_message
    if length_text is None:
        length_text = f"Password must be at least {min_length} characters long."

    def check(value: str | None) -> FieldResult:
        if value is None:
            return NO_INPUT
        if len(value) < min_length:
            return FieldError(length_text)
        if not any(c.isupper() for c in value):
            return FieldError(uppercase_message)
        if not any(c.islower() for c in value):
            return FieldError(lowercase_message)
        if not any(c.isdigit() for c in value):
            return FieldError(digit_message)
        if not any(c in SPECIAL_CHARACTERS for c in value):
            return FieldError(special_character_message)
        return SUCCESS

    return check


# ---------------------------------------------------------------------------
# Numeric bounds
# ---------------------------------------------------------------------------
#
# Epsilon widens inclusive bounds (value >= min - eps) and narrows
# exclusive ones (value > min + eps).


def _not_assessable(value: Number | None) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def _check_epsilon(epsilon: Number) -> None:
    if epsilon < 0:
        msg = f"epsilon must be >= 0, got {epsilon}"
        raise ConfigurationError(msg)


def _above(value: Number, bound: Number, inclusive: bool, epsilon: Number) -> bool:
    if inclusive:
        return value >= bound - epsilon
    return value > bound + epsilon


def _below(value: Number, bound: Number, inclusive: bool, epsilon: Number) -> bool:
    if inclusive:
        return value <= bound + epsilon
    return value < bound - epsilon


def in_range(
    min: Number,
    max: Number,
    message: str | Callable[[Number, Number], str] | None = None,
    *,
    inclusive: bool = True,
    epsilon: Number = 0,
) -> ValidationRule[Number | None]:
    """Number must lie between *min* and *max*.

    *message* may be a string or a ``(min, max) -> str`` callable.
    """
    if min > max:
        msg = f"in_range min ({min}) must not exceed max ({max})"
        raise ConfigurationError(msg)
    _check_epsilon(epsilon)
    if message is None:
        text = f"Must be a number between {min} and {max}."
    elif callable(message):
        text = message(min, max)
    else:
        text = message

    def check(value: Number | None) -> FieldResult:
        if _not_assessable(value):
            return NO_INPUT
        if _above(value, min, inclusive, epsilon) and _below(value, max, inclusive, epsilon):
            return SUCCESS
        return FieldError(text)

    return check


def min_value(
    min: Number,
    message: str | None = None,
    *,
    inclusive: bool = True,
    epsilon: Number = 0,
) -> ValidationRule[Number | None]:
    """Number must be at least *min* (strictly above when not *inclusive*)."""
    _check_epsilon(epsilon)
    text = message
    if text is None:
        text = f"Must be >= {min}." if inclusive else f"Must be > {min}."

    def check(value: Number | None) -> FieldResult:
        if _not_assessable(value):
            return NO_INPUT
        return SUCCESS if _above(value, min, inclusive, epsilon) else FieldError(text)

    return check


def max_value(
    max: Number,
    message: str | None = None,
    *,
    inclusive: bool = True,
    epsilon: Number = 0,
) -> ValidationRule[Number | None]:
    """Number must be at most *max* (strictly below when not *inclusive*)."""
    _check_epsilon(epsilon)
    text = message
    if text is None:
        text = f"Must be <= {max}." if inclusive else f"Must be < {max}."

    def check(value: Number | None) -> FieldResult:
        if _not_assessable(value):
            return NO_INPUT
        return SUCCESS if _below(value, max, inclusive, epsilon) else FieldError(text)

    return check
