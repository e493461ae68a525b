"""Tree-walking interpreter for the oko language.

The interpreter executes a parsed `Program` against a scope stack (see
`environment.py`). Top-level statements run in the global frame; every call
to a user function pushes a fresh frame that is discarded when the call
returns. Blocks of `if`, `while` and `for` run in the frame that contains
them.

Standard-library modules become callable only after an `import` statement
registers them in the interpreter's `ModuleRegistry`. The interpreter itself
performs no I/O; side effects come from the builtin functions it calls.
"""

from __future__ import annotations

import dataclasses
import math
from typing import Any, Callable as HostCallable, Dict, List, Optional, Union

from .ast import (
    Program, ImportStat, VariableAssign, BinaryExpr, UnaryExpr, NumLiteral,
    StrLiteral, Identifier, ArrayLiteral, FunctionCall, ModAccess, ReturnStat,
    FunctionDeclaration, ExprStat, IfStat, WhileStat, FeachStat,
    BinaryOperator, UnaryOperator, AssignOperator, Node,
)
from .builtin_function import BuiltinFunction, Module
from .environment import Environment
from .errors import ErrorKind, ReturnSignal, runtime_error
from .parser import parse, parse_program
from .std import BUILTIN_MODULES
from .tokenizer import tokenize
from .types import MAX_SAFE_INTEGER, Callable, Value, ValueType, to_string, type_name


COMPOUND_OPERATORS = {
    AssignOperator.AddAssign: BinaryOperator.Add,
    AssignOperator.SubtractAssign: BinaryOperator.Subtract,
    AssignOperator.MultiplyAssign: BinaryOperator.Multiply,
    AssignOperator.DivideAssign: BinaryOperator.Divide,
}

COMPARISONS = {
    BinaryOperator.Greater: lambda a, b: a > b,
    BinaryOperator.Less: lambda a, b: a < b,
    BinaryOperator.GreaterEqual: lambda a, b: a >= b,
    BinaryOperator.LessEqual: lambda a, b: a <= b,
}

# longest string a repeat may produce
MAX_STRING_LENGTH = 2 ** 29 - 24

Number = Union[int, float]


###############################################################################
# Number semantics
###############################################################################

def divide(a: Number, b: Number) -> Number:
    if b == 0:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def modulo(a: Number, b: Number) -> Number:
    # the result takes the sign of the dividend
    if b == 0:
        return math.nan
    if isinstance(a, int) and isinstance(b, int):
        r = abs(a) % abs(b)
        return -r if a < 0 else r
    try:
        return math.fmod(a, b)
    except ValueError:
        return math.nan


def power(a: Number, b: Number) -> Number:
    if a == 0 and b < 0:
        return math.inf
    try:
        result = math.pow(a, b)
    except OverflowError:
        odd_exponent = float(b).is_integer() and int(b) % 2 == 1
        return -math.inf if a < 0 and odd_exponent else math.inf
    except ValueError:
        return math.nan
    # stay exact while the result is a safe integer
    if isinstance(a, int) and isinstance(b, int) and b >= 0 and abs(result) <= MAX_SAFE_INTEGER:
        return a ** b
    return result


###############################################################################
# Module registry
###############################################################################


class ModuleRegistry:
    """Modules made available by `import`, owned by a single interpreter."""
    def __init__(self, catalog: Dict[str, HostCallable[[], Module]]):
        self.catalog = catalog
        self.loaded: Dict[str, Module] = {}

    def load(self, name: str, line: Optional[int] = None) -> Module:
        if name not in self.catalog:
            raise runtime_error(
                ErrorKind.RuntimeUnknownModule,
                f'attempted to import a module which does not exist: "{name}"',
                line,
            )
        module = self.catalog[name]()
        self.loaded[name] = module
        return module

    def get(self, name: str) -> Optional[Module]:
        return self.loaded.get(name)


###############################################################################
# Interpreter implementation
###############################################################################


class Interpreter:
    """Core interpreter that executes an oko AST."""
    def __init__(self, debug_level: int = 0, debug_file: str = 'debug.txt',
                 max_call_depth: Optional[int] = None,
                 modules: Optional[Dict[str, HostCallable[[], Module]]] = None):
        self.env = Environment()
        self.registry = ModuleRegistry(BUILTIN_MODULES if modules is None else modules)
        self.max_call_depth = max_call_depth
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w') if debug_level > 0 else None

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg)

    # Public API
    def run(self, program: Program) -> None:
        self.debug(f"run: {len(program.body)} top-level statements")
        try:
            self.execute_block(program.body)
        except RecursionError:
            raise runtime_error(
                ErrorKind.RuntimeRecursionLimitExceeded,
                'maximum call stack size exceeded, the recursion depth limit has been exceeded',
            ) from None
        finally:
            self.debug("run: finished")
            if self.debug_fp:
                self.debug_fp.close()
                self.debug_fp = None

    def execute_block(self, statements: List[Node]) -> Optional[ReturnSignal]:
        for stmt in statements:
            result = self.execute(stmt)
            # a return stops the block and travels up to the enclosing call
            if isinstance(result, ReturnSignal):
                return result
        return None

    def execute(self, node: Node) -> Optional[ReturnSignal]:
        if isinstance(node, VariableAssign):
            self.assign(node)
            return None
        if isinstance(node, ExprStat):
            self.evaluate(node.expression)
            return None
        if isinstance(node, FunctionDeclaration):
            self.env.declare(node.name, Callable(node.name, list(node.arguments), node.body))
            if self.debug_level >= 2:
                self.debug(f"define function {node.name}({', '.join(node.arguments)})")
            return None
        if isinstance(node, IfStat):
            cond = self.evaluate(node.condition)
            if self.debug_level >= 3:
                self.debug(f"if condition {cond} -> {cond.is_truthy()}")
            if cond.is_truthy():
                return self.execute_block(node.body)
            for clause in node.elifs:
                cond = self.evaluate(clause.condition)
                if self.debug_level >= 3:
                    self.debug(f"elif condition {cond} -> {cond.is_truthy()}")
                if cond.is_truthy():
                    return self.execute_block(clause.body)
            if node.else_body is not None:
                return self.execute_block(node.else_body)
            return None
        if isinstance(node, WhileStat):
            while True:
                cond = self.evaluate(node.condition)
                if self.debug_level >= 3:
                    self.debug(f"while condition {cond} -> {cond.is_truthy()}")
                if not cond.is_truthy():
                    break
                res = self.execute_block(node.body)
                if isinstance(res, ReturnSignal):
                    return res
            return None
        if isinstance(node, FeachStat):
            return self.execute_feach(node)
        if isinstance(node, ReturnStat):
            if self.env.depth == 0:
                raise runtime_error(
                    ErrorKind.RuntimeReturnOutsideFunction,
                    'attempted to use the "return" keyword outside of a function',
                    node.line,
                )
            value = self.evaluate(node.value) if node.value is not None else Value.nil()
            return ReturnSignal(value.copy())
        if isinstance(node, ImportStat):
            self.registry.load(node.module, node.line)
            if self.debug_level >= 1:
                self.debug(f"import {node.module}")
            return None
        raise NotImplementedError(f"execute: unexpected node type {type(node)}")

    def execute_feach(self, node: FeachStat) -> Optional[ReturnSignal]:
        array = self.evaluate(node.array)
        if array.type is not ValueType.Array:
            raise runtime_error(
                ErrorKind.RuntimeOperatorTypeMismatch,
                f'"for" can only iterate over an Array, got {type_name(array)}',
                node.line,
            )
        try:
            for element in list(array.value):
                if self.debug_level >= 3:
                    self.debug(f"for {node.element} = {element}")
                self.env.declare(node.element, element.copy())
                res = self.execute_block(node.body)
                if isinstance(res, ReturnSignal):
                    return res
        finally:
            self.env.unset(node.element)
        return None

    def assign(self, node: VariableAssign):
        value = self.evaluate(node.value)
        if node.operator is AssignOperator.Declare:
            self.env.declare(node.name, value.copy())
            if self.debug_level >= 2:
                self.debug(f"declare {node.name} := {value}")
            return
        found = self.env.lookup(node.name)
        if found is None:
            raise runtime_error(
                ErrorKind.RuntimeAssignUndefinedVariable,
                f'attempted to mutate the value of a variable "{node.name}" that does not exist '
                f'via the "{node.operator.value}" operator',
                node.line,
            )
        current, frame_index = found
        if isinstance(current, Callable) or current.type is not value.type:
            raise runtime_error(
                ErrorKind.RuntimeAssignTypeMismatch,
                f'attempted to mutate the value of "{node.name}" via "{node.operator.value}", '
                f'but {type_name(current)} does not match {type_name(value)}',
                node.line,
            )
        if node.operator is not AssignOperator.Assign:
            value = self.apply_binary_op(COMPOUND_OPERATORS[node.operator], current, value, node.line)
        # write back into the frame that owns the binding
        self.env.assign(frame_index, node.name, value.copy())
        if self.debug_level >= 2:
            self.debug(f"assign {node.name} {node.operator.value} {value} (frame {frame_index})")

    def evaluate(self, node: Node) -> Value:
        if isinstance(node, NumLiteral):
            return Value.number(node.value)
        if isinstance(node, StrLiteral):
            return Value.string(node.value)
        if isinstance(node, Identifier):
            binding = self.env.get(node.name)
            if binding is None:
                raise runtime_error(
                    ErrorKind.RuntimeUnresolvedIdentifier,
                    f'identifier "{node.name}" is not pointing to anything',
                    node.line,
                )
            if isinstance(binding, Callable):
                raise runtime_error(
                    ErrorKind.RuntimeFunctionNotFirstClass,
                    f'attempted to use the function "{node.name}" as a value; functions are not first-class',
                    node.line,
                )
            return binding
        if isinstance(node, ArrayLiteral):
            return Value.array([self.evaluate(el).copy() for el in node.elements])
        if isinstance(node, BinaryExpr):
            left = self.evaluate(node.left)
            right = self.evaluate(node.right)
            return self.apply_binary_op(node.operator, left, right, node.line)
        if isinstance(node, UnaryExpr):
            operand = self.evaluate(node.operand)
            return self.apply_unary_op(node.operator, operand, node.line)
        if isinstance(node, FunctionCall):
            return self.call_function(node)
        if isinstance(node, ModAccess):
            if (not isinstance(node.mod, Identifier) or not isinstance(node.member, FunctionCall)
                    or node.member.module is not None):
                raise runtime_error(
                    ErrorKind.RuntimeInvalidModuleAccess,
                    'the "::" operator can only be used to call a function located in a module',
                    node.line,
                )
            return self.call_function(dataclasses.replace(node.member, module=node.mod.name))
        raise NotImplementedError(f"evaluate: unexpected node type {type(node)}")

    def call_function(self, node: FunctionCall) -> Value:
        args = [self.evaluate(arg) for arg in node.args]
        if node.module is not None:
            return self.call_builtin(node, args)
        func = self.env.get(node.name)
        if not isinstance(func, Callable):
            raise runtime_error(
                ErrorKind.RuntimeUnknownFunction,
                f'attempted to call a function "{node.name}" which does not exist',
                node.line,
            )
        if len(args) != len(func.arguments):
            raise runtime_error(
                ErrorKind.RuntimeArityMismatch,
                f'function "{func.name}" expects {len(func.arguments)} arguments, got {len(args)}',
                node.line,
            )
        if self.max_call_depth is not None and self.env.depth >= self.max_call_depth:
            raise runtime_error(
                ErrorKind.RuntimeRecursionLimitExceeded,
                f'call depth limit of {self.max_call_depth} exceeded calling "{func.name}"',
                node.line,
            )
        frame = {name: arg.copy() for name, arg in zip(func.arguments, args)}
        if self.debug_level >= 2:
            self.debug(f"call {func.name}({', '.join(to_string(a) for a in args)})")
        self.env.push_frame(frame)
        try:
            res = self.execute_block(func.body)
        finally:
            self.env.pop_frame()
        if isinstance(res, ReturnSignal):
            return res.value
        return Value.nil()

    def call_builtin(self, node: FunctionCall, args: List[Value]) -> Value:
        module = self.registry.get(node.module)
        if module is None:
            raise runtime_error(
                ErrorKind.RuntimeModuleNotLoaded,
                f'attempted to access a module that does not exist or has not been imported yet: "{node.module}"',
                node.line,
            )
        func: Optional[BuiltinFunction] = module.get(node.name)
        if func is None:
            raise runtime_error(
                ErrorKind.RuntimeUnknownFunction,
                f'attempted to call a function "{node.module}::{node.name}" which does not exist',
                node.line,
            )
        # Check arity; None means variadic
        if func.arity is not None and len(args) != func.arity:
            raise runtime_error(
                ErrorKind.RuntimeArityMismatch,
                f'function "{node.module}::{node.name}" expects {func.arity} arguments, got {len(args)}',
                node.line,
            )
        if self.debug_level >= 2:
            self.debug(f"call builtin {node.module}::{node.name}")
        args = [arg.copy() for arg in args]
        if func.arity is None:
            result = func.fn(args)
        else:
            result = func.fn(*args)
        if result is None:
            return Value.nil()
        return result

    def apply_unary_op(self, op: UnaryOperator, operand: Value, line: int = 0) -> Value:
        if op is UnaryOperator.Not:
            if operand.type is ValueType.Nil:
                return Value.number(1)
            if operand.type is ValueType.Number:
                return Value.boolean(operand.value == 0)
            raise self.operator_error(op.value, line, operand)
        raise NotImplementedError(f"unknown unary operator {op}")

    def apply_binary_op(self, op: BinaryOperator, left: Value, right: Value, line: int = 0) -> Value:
        if op is BinaryOperator.Equal:
            if left.type is ValueType.Array or right.type is ValueType.Array:
                raise self.operator_error(op.value, line, left, right)
            return Value.boolean(left.type is right.type and left.value == right.value)
        # Nil on either side propagates
        if left.type is ValueType.Nil or right.type is ValueType.Nil:
            return Value.nil()
        numbers = left.type is ValueType.Number and right.type is ValueType.Number
        a, b = left.value, right.value
        if op is BinaryOperator.Add:
            if numbers:
                return Value.number(a + b)
            if left.type is ValueType.String and right.type is ValueType.String:
                return Value.string(a + b)
            if {left.type, right.type} == {ValueType.Number, ValueType.String}:
                return Value.string(to_string(left) + to_string(right))
        elif op is BinaryOperator.Multiply:
            if numbers:
                return Value.number(a * b)
            if {left.type, right.type} == {ValueType.Number, ValueType.String}:
                text, count = (a, b) if left.type is ValueType.String else (b, a)
                if math.isfinite(count) and count >= 0:
                    repeat = int(count)
                    if not text:
                        return Value.string('')
                    if len(text) * repeat <= MAX_STRING_LENGTH:
                        return Value.string(text * repeat)
        elif numbers:
            if op is BinaryOperator.Subtract:
                return Value.number(a - b)
            if op is BinaryOperator.Divide:
                return Value.number(divide(a, b))
            if op is BinaryOperator.Modulo:
                return Value.number(modulo(a, b))
            if op is BinaryOperator.Power:
                return Value.number(power(a, b))
            if op in COMPARISONS:
                return Value.boolean(COMPARISONS[op](a, b))
            if op is BinaryOperator.And:
                return Value.boolean(left.is_truthy() and right.is_truthy())
            if op is BinaryOperator.Or:
                return Value.boolean(left.is_truthy() or right.is_truthy())
            raise NotImplementedError(f"unknown binary operator {op}")
        raise self.operator_error(op.value, line, left, right)

    def operator_error(self, op: str, line: int, *operands: Value):
        kinds = ' and '.join(type_name(v) for v in operands)
        return runtime_error(
            ErrorKind.RuntimeOperatorTypeMismatch,
            f'attempted to use the "{op}" operator with types of values it does not support ({kinds})',
            line,
        )


def execute(program: Program, **kwargs: Any) -> Interpreter:
    """Run a parsed program in a fresh interpreter and return the interpreter."""
    interpreter = Interpreter(**kwargs)
    interpreter.run(program)
    return interpreter


def run_program(source: str, debug_level: int = 0) -> Interpreter:
    """Convenience function to tokenize, parse and run oko source text."""
    return execute(parse_program(source), debug_level=debug_level)


__all__ = [
    'Interpreter', 'ModuleRegistry', 'execute', 'run_program',
    'parse', 'parse_program', 'tokenize',
]
