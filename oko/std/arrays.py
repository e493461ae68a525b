from oko.builtin_function import BuiltinFunction, Module
from oko.std.common import as_index, expect
from oko.std.strings import relative_index
from oko.types import Value, ValueType, to_string


def populate_arru_module() -> Module:
    # arrays are values: push and remove return a new array
    def std_len(arr: Value) -> Value:
        expect('len', arr, ValueType.Array)
        return Value.number(len(arr.value))

    def std_at(arr: Value, index: Value) -> Value:
        expect('at', arr, ValueType.Array)
        expect('at', index, ValueType.Number)
        i = relative_index(as_index(index.value), len(arr.value))
        return Value.nil() if i is None else arr.value[i].copy()

    def std_push(arr: Value, item: Value) -> Value:
        expect('push', arr, ValueType.Array)
        result = arr.copy()
        result.value.append(item.copy())
        return result

    def std_remove(arr: Value, index: Value) -> Value:
        expect('remove', arr, ValueType.Array)
        expect('remove', index, ValueType.Number)
        result = arr.copy()
        i = relative_index(as_index(index.value), len(result.value))
        if i is not None:
            del result.value[i]
        return result

    def std_join(arr: Value, separator: Value) -> Value:
        expect('join', arr, ValueType.Array)
        expect('join', separator, ValueType.String)
        return Value.string(separator.value.join(to_string(x) for x in arr.value))

    return {
        'len': BuiltinFunction('len', 1, std_len),
        'at': BuiltinFunction('at', 2, std_at),
        'push': BuiltinFunction('push', 2, std_push),
        'remove': BuiltinFunction('remove', 2, std_remove),
        'join': BuiltinFunction('join', 2, std_join),
    }
