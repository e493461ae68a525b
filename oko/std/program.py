import sys

from oko.builtin_function import BuiltinFunction, Module
from oko.errors import ErrorKind, runtime_error
from oko.std.common import expect, expect_finite
from oko.types import Value, ValueType


def populate_prog_module() -> Module:
    def std_exit(code: Value) -> None:
        expect_finite('exit', code)
        sys.exit(int(code.value))

    def std_throw(message: Value) -> None:
        expect('throw', message, ValueType.String)
        raise runtime_error(ErrorKind.RuntimeUserThrow, message.value)

    return {
        'exit': BuiltinFunction('exit', 1, std_exit),
        'throw': BuiltinFunction('throw', 1, std_throw),
    }
