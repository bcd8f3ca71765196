"""Runtime value model for Lox.

Every value the evaluator produces is one of five variants: `Number`,
`String`, `TrueValue`, `FalseValue` and `NilValue`. The three valueless
variants are used through the module-level singletons `TRUE`, `FALSE` and
`NIL`. Only `FALSE` and `NIL` are falsy.

Values never coerce into each other. Equality is defined across variants
(mismatched variants are simply unequal) but arithmetic and ordering are
only defined where the evaluator says so.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal


class LiteralValue:
    """Base class for all runtime values."""
    pass


@dataclass(frozen=True)
class Number(LiteralValue):
    value: float

    def __repr__(self) -> str:
        return f"Number({self.value!r})"


@dataclass(frozen=True)
class String(LiteralValue):
    value: str

    def __repr__(self) -> str:
        return f"String({self.value!r})"


@dataclass(frozen=True)
class TrueValue(LiteralValue):
    def __repr__(self) -> str:
        return 'True'


@dataclass(frozen=True)
class FalseValue(LiteralValue):
    def __repr__(self) -> str:
        return 'False'


@dataclass(frozen=True)
class NilValue(LiteralValue):
    def __repr__(self) -> str:
        return 'Nil'


TRUE = TrueValue()
FALSE = FalseValue()
NIL = NilValue()


def from_bool(flag: bool) -> LiteralValue:
    return TRUE if flag else FALSE


def is_truthy(value: LiteralValue) -> bool:
    return not isinstance(value, (FalseValue, NilValue))


def negate(value: LiteralValue) -> LiteralValue:
    """Logical negation: only false and nil negate to true."""
    return from_bool(not is_truthy(value))


def values_equal(a: LiteralValue, b: LiteralValue) -> bool:
    """Structural equality: same variant and same payload."""
    if isinstance(a, Number) and isinstance(b, Number):
        # float comparison, so NaN is not equal to itself
        return a.value == b.value
    if isinstance(a, String) and isinstance(b, String):
        return a.value == b.value
    return type(a) is type(b) and isinstance(a, (TrueValue, FalseValue, NilValue))


def format_number(value: float) -> str:
    if math.isnan(value):
        return 'NaN'
    if math.isinf(value):
        return 'inf' if value > 0 else '-inf'
    if value.is_integer():
        if value == 0 and math.copysign(1.0, value) < 0:
            return '-0'
        return str(int(value))
    text = repr(value)
    if 'e' in text:
        # shortest digits, written out without an exponent
        return format(Decimal(text), 'f')
    return text


def to_string(value: LiteralValue) -> str:
    """Convert a Lox value to the text `print` writes for it."""
    if isinstance(value, Number):
        return format_number(value.value)
    if isinstance(value, String):
        return value.value
    if isinstance(value, TrueValue):
        return 'true'
    if isinstance(value, FalseValue):
        return 'false'
    if isinstance(value, NilValue):
        return 'nil'
    raise TypeError(f"not a Lox value: {value!r}")


def type_name(value: LiteralValue) -> str:
    """Return the Lox type name of a runtime value."""
    if isinstance(value, Number):
        return 'number'
    if isinstance(value, String):
        return 'string'
    if isinstance(value, (TrueValue, FalseValue)):
        return 'boolean'
    if isinstance(value, NilValue):
        return 'nil'
    return type(value).__name__
