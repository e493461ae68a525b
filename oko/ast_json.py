"""JSON serialization/deserialization for the oko AST.

This module converts between oko AST dataclasses and plain Python
dict/list structures suitable for JSON encoding, so a parsed program can be
dumped with `--emit-ast` and executed later with `--ast`. Operators are
stored by their source spelling.
"""

from __future__ import annotations

from typing import Any, Dict, List

from .ast import (
    Program,
    ImportStat,
    VariableAssign,
    BinaryExpr,
    UnaryExpr,
    NumLiteral,
    StrLiteral,
    Identifier,
    ArrayLiteral,
    FunctionCall,
    ModAccess,
    ReturnStat,
    FunctionDeclaration,
    ExprStat,
    ElifClause,
    IfStat,
    WhileStat,
    FeachStat,
    BinaryOperator,
    UnaryOperator,
    AssignOperator,
)


def block_to_obj(body: List[Any]) -> List[Any]:
    return [ast_to_obj(s) for s in body]


def block_from_obj(items: List[Any]) -> List[Any]:
    return [ast_from_obj(s) for s in items]


def ast_to_obj(node: Any) -> Any:
    if node is None:
        return None

    if isinstance(node, Program):
        return {"type": "Program", "body": block_to_obj(node.body)}
    if isinstance(node, ImportStat):
        return {"type": "ImportStat", "module": node.module, "line": node.line}
    if isinstance(node, VariableAssign):
        return {
            "type": "VariableAssign",
            "name": node.name,
            "operator": node.operator.value,
            "value": ast_to_obj(node.value),
            "line": node.line,
        }
    if isinstance(node, BinaryExpr):
        return {
            "type": "BinaryExpr",
            "operator": node.operator.value,
            "left": ast_to_obj(node.left),
            "right": ast_to_obj(node.right),
            "line": node.line,
        }
    if isinstance(node, UnaryExpr):
        return {
            "type": "UnaryExpr",
            "operator": node.operator.value,
            "operand": ast_to_obj(node.operand),
            "line": node.line,
        }
    if isinstance(node, NumLiteral):
        return {"type": "NumLiteral", "value": node.value, "line": node.line}
    if isinstance(node, StrLiteral):
        return {"type": "StrLiteral", "value": node.value, "line": node.line}
    if isinstance(node, Identifier):
        return {"type": "Identifier", "name": node.name, "line": node.line}
    if isinstance(node, ArrayLiteral):
        return {"type": "ArrayLiteral", "elements": block_to_obj(node.elements), "line": node.line}
    if isinstance(node, FunctionCall):
        return {
            "type": "FunctionCall",
            "name": node.name,
            "args": block_to_obj(node.args),
            "module": node.module,
            "line": node.line,
        }
    if isinstance(node, ModAccess):
        return {
            "type": "ModAccess",
            "mod": ast_to_obj(node.mod),
            "member": ast_to_obj(node.member),
            "line": node.line,
        }
    if isinstance(node, ReturnStat):
        return {"type": "ReturnStat", "value": ast_to_obj(node.value), "line": node.line}
    if isinstance(node, FunctionDeclaration):
        return {
            "type": "FunctionDeclaration",
            "name": node.name,
            "arguments": list(node.arguments),
            "body": block_to_obj(node.body),
            "line": node.line,
        }
    if isinstance(node, ExprStat):
        return {"type": "ExprStat", "expression": ast_to_obj(node.expression)}
    if isinstance(node, IfStat):
        return {
            "type": "IfStat",
            "condition": ast_to_obj(node.condition),
            "body": block_to_obj(node.body),
            "elifs": [
                {"condition": ast_to_obj(c.condition), "body": block_to_obj(c.body)}
                for c in node.elifs
            ],
            "else": None if node.else_body is None else block_to_obj(node.else_body),
        }
    if isinstance(node, WhileStat):
        return {"type": "WhileStat", "condition": ast_to_obj(node.condition), "body": block_to_obj(node.body)}
    if isinstance(node, FeachStat):
        return {
            "type": "FeachStat",
            "element": node.element,
            "array": ast_to_obj(node.array),
            "body": block_to_obj(node.body),
            "line": node.line,
        }

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def ast_from_obj(obj: Any) -> Any:
    if obj is None:
        return None
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")
    line = obj.get("line", 0)
    if t == "Program":
        return Program(body=block_from_obj(obj["body"]))
    if t == "ImportStat":
        return ImportStat(module=obj["module"], line=line)
    if t == "VariableAssign":
        return VariableAssign(
            name=obj["name"],
            operator=AssignOperator(obj["operator"]),
            value=ast_from_obj(obj["value"]),
            line=line,
        )
    if t == "BinaryExpr":
        return BinaryExpr(
            operator=BinaryOperator(obj["operator"]),
            left=ast_from_obj(obj["left"]),
            right=ast_from_obj(obj["right"]),
            line=line,
        )
    if t == "UnaryExpr":
        return UnaryExpr(operator=UnaryOperator(obj["operator"]), operand=ast_from_obj(obj["operand"]), line=line)
    if t == "NumLiteral":
        return NumLiteral(value=obj["value"], line=line)
    if t == "StrLiteral":
        return StrLiteral(value=obj["value"], line=line)
    if t == "Identifier":
        return Identifier(name=obj["name"], line=line)
    if t == "ArrayLiteral":
        return ArrayLiteral(elements=block_from_obj(obj["elements"]), line=line)
    if t == "FunctionCall":
        return FunctionCall(
            name=obj["name"],
            args=block_from_obj(obj["args"]),
            module=obj.get("module"),
            line=line,
        )
    if t == "ModAccess":
        return ModAccess(mod=ast_from_obj(obj["mod"]), member=ast_from_obj(obj["member"]), line=line)
    if t == "ReturnStat":
        return ReturnStat(value=ast_from_obj(obj.get("value")), line=line)
    if t == "FunctionDeclaration":
        return FunctionDeclaration(
            name=obj["name"],
            arguments=list(obj["arguments"]),
            body=block_from_obj(obj["body"]),
            line=line,
        )
    if t == "ExprStat":
        return ExprStat(expression=ast_from_obj(obj["expression"]))
    if t == "IfStat":
        else_obj = obj.get("else")
        return IfStat(
            condition=ast_from_obj(obj["condition"]),
            body=block_from_obj(obj["body"]),
            elifs=[
                ElifClause(ast_from_obj(c["condition"]), block_from_obj(c["body"]))
                for c in obj.get("elifs", [])
            ],
            else_body=None if else_obj is None else block_from_obj(else_obj),
        )
    if t == "WhileStat":
        return WhileStat(condition=ast_from_obj(obj["condition"]), body=block_from_obj(obj["body"]))
    if t == "FeachStat":
        return FeachStat(
            element=obj["element"],
            array=ast_from_obj(obj["array"]),
            body=block_from_obj(obj["body"]),
            line=line,
        )

    raise ValueError(f"Unknown AST node type: {t}")
