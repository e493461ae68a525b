from typing import Optional

from oko.builtin_function import BuiltinFunction, Module
from oko.std.common import as_index, expect
from oko.types import Value, ValueType


def relative_index(index: int, length: int) -> Optional[int]:
    """Resolve a possibly negative index; None when it is out of range."""
    if index < 0:
        index += length
    if 0 <= index < length:
        return index
    return None


def populate_stru_module() -> Module:
    def std_len(s: Value) -> Value:
        expect('len', s, ValueType.String)
        return Value.number(len(s.value))

    def std_at(s: Value, index: Value) -> Value:
        expect('at', s, ValueType.String)
        expect('at', index, ValueType.Number)
        i = relative_index(as_index(index.value), len(s.value))
        return Value.nil() if i is None else Value.string(s.value[i])

    def std_sub(s: Value, start: Value, end: Value) -> Value:
        for arg in (start, end):
            expect('sub', arg, ValueType.Number)
        expect('sub', s, ValueType.String)
        length = len(s.value)
        lo = min(max(as_index(start.value), 0), length)
        hi = min(max(as_index(end.value), 0), length)
        if lo > hi:
            lo, hi = hi, lo
        return Value.string(s.value[lo:hi])

    def std_split(s: Value, delim: Value) -> Value:
        expect('split', s, ValueType.String)
        expect('split', delim, ValueType.String)
        if delim.value == '':
            parts = list(s.value)
        else:
            parts = s.value.split(delim.value)
        return Value.array([Value.string(p) for p in parts])

    def std_replace(s: Value, find: Value, repl: Value) -> Value:
        for arg in (s, find, repl):
            expect('replace', arg, ValueType.String)
        return Value.string(s.value.replace(find.value, repl.value))

    def string_op(name, op):
        def fn(s: Value) -> Value:
            expect(name, s, ValueType.String)
            return Value.string(op(s.value))
        return BuiltinFunction(name, 1, fn)

    return {
        'len': BuiltinFunction('len', 1, std_len),
        'at': BuiltinFunction('at', 2, std_at),
        'sub': BuiltinFunction('sub', 3, std_sub),
        'split': BuiltinFunction('split', 2, std_split),
        'lower': string_op('lower', str.lower),
        'upper': string_op('upper', str.upper),
        'trim': string_op('trim', str.strip),
        'replace': BuiltinFunction('replace', 3, std_replace),
    }
