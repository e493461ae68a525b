import math

from oko.builtin_function import BuiltinFunction, Module
from oko.std.common import arg_type_error
from oko.types import Value, ValueType, to_string


def numberize(value: Value) -> Value:
    """Convert Nil or a String to a Number; unparsable strings become Nil."""
    if value.type is ValueType.Nil:
        return Value.number(0)
    if value.type is ValueType.Number:
        return value.copy()
    text = value.value.strip()
    if text == '':
        return Value.number(0)
    if '_' in text:
        return Value.nil()
    try:
        return Value.number(int(text))
    except ValueError:
        pass
    try:
        n = float(text)
    except ValueError:
        return Value.nil()
    return Value.number(n) if math.isfinite(n) else Value.nil()


def populate_tu_module() -> Module:
    def std_get_nil() -> None:
        return None

    def std_to_number(value: Value) -> Value:
        if value.type is ValueType.Array:
            raise arg_type_error('toNumber')
        return numberize(value)

    def std_to_string(value: Value) -> Value:
        return Value.string(to_string(value))

    def std_type_of(value: Value) -> Value:
        return Value.string(value.type.value)

    return {
        'getNil': BuiltinFunction('getNil', 0, std_get_nil),
        'toNumber': BuiltinFunction('toNumber', 1, std_to_number),
        'toString': BuiltinFunction('toString', 1, std_to_string),
        'typeOf': BuiltinFunction('typeOf', 1, std_type_of),
    }
