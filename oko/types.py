"""Runtime value model for oko.

Values are tagged snapshots: every binding, argument and array element owns
its own copy, so two names never share mutable storage. User functions are
represented by `Callable`, which deliberately is not a `Value` and can only
live in a scope frame under its declared name.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Union
import math


MAX_SAFE_INTEGER = 2 ** 53


def normalize_number(n: Union[int, float]) -> Union[int, float]:
    """Keep integers exact only while a double could hold them.

    Larger integers become floats and ones beyond the double range become
    infinite, so Number arithmetic behaves like IEEE doubles.
    """
    if isinstance(n, int) and abs(n) > MAX_SAFE_INTEGER:
        try:
            return float(n)
        except OverflowError:
            return math.inf if n > 0 else -math.inf
    return n


class ValueType(Enum):
    Number = 'Number'
    String = 'String'
    Array = 'Array'
    Nil = 'Nil'


@dataclass
class Value:
    """A tagged oko value.

    `value` holds an `int` or `float` for Number, a `str` for String, a list
    of `Value` for Array and `None` for Nil.
    """
    type: ValueType
    value: Any = None

    def __repr__(self) -> str:
        return f"{self.type.value}({self.value!r})"

    # Convenience constructors
    @staticmethod
    def number(n: Union[int, float]) -> 'Value':
        return Value(ValueType.Number, normalize_number(n))

    @staticmethod
    def string(s: str) -> 'Value':
        return Value(ValueType.String, s)

    @staticmethod
    def array(items: List['Value']) -> 'Value':
        return Value(ValueType.Array, items)

    @staticmethod
    def nil() -> 'Value':
        return Value(ValueType.Nil, None)

    @staticmethod
    def boolean(flag: bool) -> 'Value':
        return Value(ValueType.Number, 1 if flag else 0)

    def copy(self) -> 'Value':
        """Return a deep, independent copy; arrays are copied recursively."""
        if self.type is ValueType.Array:
            return Value(ValueType.Array, [item.copy() for item in self.value])
        return Value(self.type, self.value)

    def is_truthy(self) -> bool:
        """Nil, 0, the empty string and the empty array are falsy."""
        if self.type is ValueType.Nil:
            return False
        if self.type is ValueType.Number:
            return self.value != 0
        if self.type is ValueType.String:
            return self.value != ''
        return len(self.value) > 0


@dataclass
class Callable:
    """A user-defined function: parameter names plus the body statements."""
    name: str
    arguments: List[str]
    body: List[Any] = field(repr=False)

    def __repr__(self) -> str:
        return f"<funct {self.name}({', '.join(self.arguments)})>"


Binding = Union[Value, Callable]


def format_number(n: Union[int, float]) -> str:
    """Format a number the way oko prints it: integral values drop the fraction."""
    if isinstance(n, float):
        if math.isnan(n):
            return 'NaN'
        if math.isinf(n):
            return 'Infinity' if n > 0 else '-Infinity'
        if n.is_integer():
            return str(int(n))
        return repr(n)
    return str(n)


def to_string(value: Value) -> str:
    if value.type is ValueType.Nil:
        return 'Nil'
    if value.type is ValueType.Number:
        return format_number(value.value)
    if value.type is ValueType.Array:
        return '[ ' + ', '.join(to_string(item) for item in value.value) + ' ]'
    return value.value


def type_name(binding: Binding) -> str:
    if isinstance(binding, Callable):
        return 'Function'
    return binding.type.value


def parse_number(text: str) -> Union[int, float]:
    """Convert numeric text to an int, or a float when it has a fraction.

    Raises ValueError when the text is not a plain decimal literal.
    """
    if '_' in text:
        raise ValueError(f'invalid number literal {text!r}')
    if '.' in text:
        return float(text)
    return int(text)
