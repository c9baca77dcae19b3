"""Runtime values and helpers for NPL.

Every value carries an explicit kind. Numbers and booleans keep a canonical
textual form (``'2.5'``, ``'true'``): arithmetic parses the text, computes
with a Python float and formats the result back, so printed values match
the decimal text the language has always produced.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING, Any, ClassVar, List, Union

if TYPE_CHECKING:
    from .ast import Block
    from .builtin_function import NativeFunction
    from .environment import Environment


@dataclass(frozen=True)
class NumberVal:
    value: str
    kind: ClassVar[str] = 'number'

    @staticmethod
    def of(number: float) -> 'NumberVal':
        return NumberVal(format_number(number))

    def to_float(self) -> float:
        return float(self.value)

    def __repr__(self) -> str:
        return f"Number({self.value})"


@dataclass(frozen=True)
class StringVal:
    value: str
    kind: ClassVar[str] = 'string'

    def __repr__(self) -> str:
        return f"String({self.value!r})"


@dataclass(frozen=True)
class BooleanVal:
    value: str  # 'true' or 'false'
    kind: ClassVar[str] = 'boolean'

    @staticmethod
    def of(flag: bool) -> 'BooleanVal':
        return BooleanVal('true' if flag else 'false')

    @property
    def is_true(self) -> bool:
        return self.value == 'true'

    def __repr__(self) -> str:
        return f"Boolean({self.value})"


@dataclass(frozen=True)
class NullVal:
    kind: ClassVar[str] = 'null'

    def __repr__(self) -> str:
        return 'null'


@dataclass(eq=False)
class ArrayVal:
    """An ordered list of runtime values. Compared by identity."""
    items: List[Any] = field(default_factory=list)
    kind: ClassVar[str] = 'array'

    def __repr__(self) -> str:
        return f"Array({self.items!r})"


@dataclass(eq=False)
class FunctionVal:
    """A user-defined function together with the environment it was declared in."""
    name: str
    params: List[str]
    body: 'Block'
    closure: 'Environment'
    kind: ClassVar[str] = 'function'

    def __repr__(self) -> str:
        return f"<function {self.name}>"


RuntimeValue = Union[NumberVal, StringVal, BooleanVal, NullVal, ArrayVal, FunctionVal, 'NativeFunction']


def format_number(number: float) -> str:
    """Format a float the way NPL prints numbers.

    Integral values print without a fraction, everything else uses the
    shortest round-trip representation. Exponent notation is only used
    below 1e-6 and from 1e21 upwards.
    """
    if math.isnan(number):
        return 'NaN'
    if math.isinf(number):
        return 'Infinity' if number > 0 else '-Infinity'
    if number.is_integer() and abs(number) < 1e21:
        return str(int(number))
    text = repr(number)
    if 'e' not in text:
        return text
    if 1e-6 <= abs(number) < 1e21:
        return format(Decimal(text), 'f')
    mantissa, exponent = text.split('e')
    exp = int(exponent)
    return f"{mantissa}e{'+' if exp > 0 else '-'}{abs(exp)}"


FLOAT_PREFIX = re.compile(r'^\s*([+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))')


def parse_float(text: str) -> float:
    """Read the longest numeric prefix of text; NaN if there is none."""
    match = FLOAT_PREFIX.match(text)
    if match is None:
        return math.nan
    return float(match.group(1).replace('Infinity', 'inf'))


def to_number(value: Any) -> float:
    """Coerce a runtime value to a float for ordering and mixed arithmetic."""
    if isinstance(value, NumberVal):
        return value.to_float()
    if isinstance(value, BooleanVal):
        return 1.0 if value.is_true else 0.0
    if isinstance(value, StringVal):
        return parse_float(value.value)
    return math.nan


def to_int(value: Any) -> int:
    """Truncate a value's numeric coercion toward zero; 0 if not a number."""
    number = to_number(value)
    if math.isnan(number) or math.isinf(number):
        return 0
    return int(number)


def is_falsy(value: Any) -> bool:
    """False, null, numeric zero and the empty string are falsy."""
    if isinstance(value, BooleanVal):
        return not value.is_true
    if isinstance(value, NullVal):
        return True
    if isinstance(value, NumberVal):
        return value.to_float() == 0
    if isinstance(value, StringVal):
        return value.value == ''
    return False


def type_name(value: Any) -> str:
    """Return the lowercase NPL kind of a runtime value."""
    return getattr(value, 'kind', type(value).__name__)


def to_string(value: Any) -> str:
    """Return the textual form of a value, as printed and concatenated."""
    if isinstance(value, (NumberVal, StringVal, BooleanVal)):
        return value.value
    if isinstance(value, NullVal):
        return 'null'
    if isinstance(value, ArrayVal):
        return '[' + ', '.join(to_string(item) for item in value.items) + ']'
    return repr(value)
