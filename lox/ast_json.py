"""JSON serialization/deserialization for Lox ASTs.

This module converts between Lox AST dataclasses and plain Python
dict/list structures suitable for JSON encoding. A whole program is
stored as `{"type": "Program", "body": [...]}`. Runtime values are
tagged with `__value__`, and numbers that JSON cannot represent
(infinities, NaN) are written as strings.
"""

from __future__ import annotations

import math
from typing import Any, Dict, List

from .ast import (
    Binary,
    Unary,
    Grouping,
    Literal,
    VariableReference,
    ExpressionStatement,
    PrintStatement,
    VariableDeclaration,
    Node,
)
from .tokens import Token, TokenType
from .types import LiteralValue, Number, String, TrueValue, FalseValue, NilValue, TRUE, FALSE, NIL


def number_to_obj(x: float) -> Any:
    if math.isnan(x):
        return 'nan'
    if math.isinf(x):
        return 'inf' if x > 0 else '-inf'
    return x


def number_from_obj(o: Any) -> float:
    return float(o)


def value_to_obj(v: LiteralValue) -> Dict[str, Any]:
    if isinstance(v, Number):
        return {"__value__": "Number", "value": number_to_obj(v.value)}
    if isinstance(v, String):
        return {"__value__": "String", "value": v.value}
    if isinstance(v, TrueValue):
        return {"__value__": "True"}
    if isinstance(v, FalseValue):
        return {"__value__": "False"}
    if isinstance(v, NilValue):
        return {"__value__": "Nil"}
    raise TypeError(f"Unsupported value for serialization: {type(v).__name__}")


def value_from_obj(o: Dict[str, Any]) -> LiteralValue:
    if not isinstance(o, dict):
        raise TypeError("Invalid value object")
    kind = o.get("__value__")
    if kind == "Number":
        return Number(number_from_obj(o["value"]))
    if kind == "String":
        return String(o["value"])
    if kind == "True":
        return TRUE
    if kind == "False":
        return FALSE
    if kind == "Nil":
        return NIL
    raise ValueError(f"Unknown value kind: {kind}")


def token_to_obj(t: Token) -> Dict[str, Any]:
    literal = number_to_obj(t.literal) if isinstance(t.literal, float) else t.literal
    return {"type": t.type.name, "lexeme": t.lexeme, "literal": literal, "line": t.line}


def token_from_obj(o: Dict[str, Any]) -> Token:
    type_ = TokenType[o["type"]]
    literal = o.get("literal")
    if type_ == TokenType.NUMBER and literal is not None:
        literal = number_from_obj(literal)
    return Token(type_, o["lexeme"], literal, int(o.get("line", 0)))


def ast_to_obj(node: Any) -> Any:
    if node is None:
        return None
    if isinstance(node, list):
        return {"type": "Program", "body": [ast_to_obj(n) for n in node]}

    if isinstance(node, Binary):
        return {
            "type": "Binary",
            "left": ast_to_obj(node.left),
            "operator": token_to_obj(node.operator),
            "right": ast_to_obj(node.right),
        }
    if isinstance(node, Unary):
        return {"type": "Unary", "operator": token_to_obj(node.operator), "right": ast_to_obj(node.right)}
    if isinstance(node, Grouping):
        return {"type": "Grouping", "node": ast_to_obj(node.node)}
    if isinstance(node, Literal):
        return {"type": "Literal", "value": value_to_obj(node.value)}
    if isinstance(node, VariableReference):
        return {"type": "VariableReference", "name": node.name, "line": node.line}
    if isinstance(node, ExpressionStatement):
        return {"type": "ExpressionStatement", "value": ast_to_obj(node.value)}
    if isinstance(node, PrintStatement):
        return {"type": "PrintStatement", "value": ast_to_obj(node.value)}
    if isinstance(node, VariableDeclaration):
        return {
            "type": "VariableDeclaration",
            "name": node.name,
            "initializer": ast_to_obj(node.initializer),
            "line": node.line,
        }

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def ast_from_obj(obj: Any) -> Any:
    if obj is None:
        return None
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")
    if t == "Program":
        return [ast_from_obj(n) for n in obj["body"]]
    if t == "Binary":
        return Binary(
            left=ast_from_obj(obj["left"]),
            operator=token_from_obj(obj["operator"]),
            right=ast_from_obj(obj["right"]),
        )
    if t == "Unary":
        return Unary(operator=token_from_obj(obj["operator"]), right=ast_from_obj(obj["right"]))
    if t == "Grouping":
        return Grouping(node=ast_from_obj(obj["node"]))
    if t == "Literal":
        return Literal(value=value_from_obj(obj["value"]))
    if t == "VariableReference":
        return VariableReference(name=obj["name"], line=int(obj.get("line", 0)))
    if t == "ExpressionStatement":
        return ExpressionStatement(value=ast_from_obj(obj["value"]))
    if t == "PrintStatement":
        return PrintStatement(value=ast_from_obj(obj["value"]))
    if t == "VariableDeclaration":
        return VariableDeclaration(
            name=obj["name"],
            initializer=ast_from_obj(obj.get("initializer")),
            line=int(obj.get("line", 0)),
        )

    raise ValueError(f"Unknown AST node type: {t}")


def program_to_obj(statements: List[Node]) -> Dict[str, Any]:
    return ast_to_obj(list(statements))


def program_from_obj(obj: Any) -> List[Node]:
    program = ast_from_obj(obj)
    if not isinstance(program, list):
        raise ValueError("AST JSON does not hold a Program")
    return program
