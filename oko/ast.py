"""Abstract Syntax Tree (AST) definitions for the oko language.

The parser builds these nodes once; the interpreter only reads them. Nodes
that a runtime error can point at record the source `line` they start on.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union


class BinaryOperator(Enum):
    Or = '||'
    And = '&&'
    Equal = '=='
    Greater = '>'
    Less = '<'
    GreaterEqual = '>='
    LessEqual = '<='
    Add = '+'
    Subtract = '-'
    Multiply = '*'
    Divide = '/'
    Modulo = '%'
    Power = '^'


class UnaryOperator(Enum):
    Not = '!'


class AssignOperator(Enum):
    Declare = ':='
    Assign = '='
    AddAssign = '+='
    SubtractAssign = '-='
    MultiplyAssign = '*='
    DivideAssign = '/='


@dataclass
class Node:
    """Base class for all AST nodes."""
    pass


@dataclass
class Program(Node):
    body: List[Node]


@dataclass
class ImportStat(Node):
    module: str
    line: int = 0


@dataclass
class VariableAssign(Node):
    name: str
    operator: AssignOperator
    value: Node
    line: int = 0


@dataclass
class BinaryExpr(Node):
    operator: BinaryOperator
    left: Node
    right: Node
    line: int = 0


@dataclass
class UnaryExpr(Node):
    operator: UnaryOperator
    operand: Node
    line: int = 0


@dataclass
class NumLiteral(Node):
    value: Union[int, float]
    line: int = 0


@dataclass
class StrLiteral(Node):
    value: str
    line: int = 0


@dataclass
class Identifier(Node):
    name: str
    line: int = 0


@dataclass
class ArrayLiteral(Node):
    elements: List[Node]
    line: int = 0


@dataclass
class FunctionCall(Node):
    name: str
    args: List[Node]
    module: Optional[str] = None  # set when reached through ModAccess
    line: int = 0


@dataclass
class ModAccess(Node):
    mod: Node
    member: Node
    line: int = 0


@dataclass
class ReturnStat(Node):
    value: Optional[Node]
    line: int = 0


@dataclass
class FunctionDeclaration(Node):
    name: str
    arguments: List[str]
    body: List[Node]
    line: int = 0


@dataclass
class ExprStat(Node):
    expression: Node


@dataclass
class ElifClause:
    condition: Node
    body: List[Node]


@dataclass
class IfStat(Node):
    condition: Node
    body: List[Node]
    elifs: List[ElifClause] = field(default_factory=list)
    else_body: Optional[List[Node]] = None


@dataclass
class WhileStat(Node):
    condition: Node
    body: List[Node]


@dataclass
class FeachStat(Node):
    element: str
    array: Node
    body: List[Node]
    line: int = 0
