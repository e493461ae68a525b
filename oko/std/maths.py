import math
import random

from oko.builtin_function import BuiltinFunction, Module
from oko.std.common import expect, finite_or_nil
from oko.types import Value, ValueType


def _unary(name, op):
    def fn(num: Value) -> Value:
        expect(name, num, ValueType.Number)
        try:
            return finite_or_nil(op(num.value))
        except (ValueError, OverflowError):
            return Value.nil()
    return BuiltinFunction(name, 1, fn)


def _round_half_up(x):
    return math.floor(x + 0.5)


def populate_math_module() -> Module:
    def std_log(num: Value, base: Value) -> Value:
        expect('log', num, ValueType.Number)
        expect('log', base, ValueType.Number)
        try:
            return finite_or_nil(math.log(num.value) / math.log(base.value))
        except (ValueError, ZeroDivisionError):
            return Value.nil()

    def std_random() -> Value:
        return Value.number(random.random())

    module = {
        name: _unary(name, op) for name, op in (
            ('sqrt', math.sqrt),
            ('abs', abs),
            ('round', _round_half_up),
            ('ceil', math.ceil),
            ('floor', math.floor),
            ('sin', math.sin),
            ('cos', math.cos),
            ('tan', math.tan),
        )
    }
    module['log'] = BuiltinFunction('log', 2, std_log)
    module['random'] = BuiltinFunction('random', 0, std_random)
    return module
