from .basic_io import BasicIO
from oko.builtin_function import BuiltinFunction, Module
from oko.std.common import expect
from oko.types import Value, ValueType, to_string
from typing import List


def populate_io_module() -> Module:
    basic_io = BasicIO()

    def std_println(args: List[Value]) -> None:
        basic_io.write(' '.join(to_string(a) for a in args))

    def std_print(args: List[Value]) -> None:
        basic_io.write(' '.join(to_string(a) for a in args), end='')

    def std_input() -> Value:
        line = basic_io.read_line()
        return Value.string(line) if line else Value.nil()

    def std_read_text_file(path: Value) -> Value:
        expect('readTextFile', path, ValueType.String)
        content = basic_io.read_text_file(path.value)
        if content is None:
            return Value.nil()
        return Value.string(content)

    def std_write_text_file(path: Value, content: Value) -> Value:
        expect('writeTextFile', path, ValueType.String)
        expect('writeTextFile', content, ValueType.String)
        if not basic_io.write_text_file(path.value, content.value):
            return Value.nil()
        return Value.number(1)

    return {
        'println': BuiltinFunction('println', None, std_println),
        'print': BuiltinFunction('print', None, std_print),
        'input': BuiltinFunction('input', 0, std_input),
        'readTextFile': BuiltinFunction('readTextFile', 1, std_read_text_file),
        'writeTextFile': BuiltinFunction('writeTextFile', 2, std_write_text_file),
    }
