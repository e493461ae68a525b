import math
from typing import Union

from oko.errors import ErrorKind, OkoRuntimeError, runtime_error
from oko.types import Value, ValueType


def arg_type_error(name: str) -> OkoRuntimeError:
    return runtime_error(
        ErrorKind.RuntimeBuiltinArgTypeMismatch,
        f'attempted to use the function "{name}" with arguments of types it does not support',
    )


def expect(name: str, value: Value, *types: ValueType):
    if value.type not in types:
        raise arg_type_error(name)


def expect_finite(name: str, value: Value):
    expect(name, value, ValueType.Number)
    if not math.isfinite(value.value):
        raise arg_type_error(name)


def finite_or_nil(n: Union[int, float]) -> Value:
    if isinstance(n, float) and not math.isfinite(n):
        return Value.nil()
    return Value.number(n)


def as_index(n: Union[int, float]) -> int:
    # indexes are truncated toward zero
    return int(n) if math.isfinite(n) else 0
