"""Render Lox ASTs in a parenthesized prefix form, e.g. `(* (group (+ 1 2)) 3)`."""

from __future__ import annotations

from typing import List

from .ast import (
    Binary, Unary, Grouping, Literal, VariableReference,
    ExpressionStatement, PrintStatement, VariableDeclaration, Node,
)
from .types import String, to_string


def parenthesize(name: str, *nodes: Node) -> str:
    parts = [name] + [stringify(n) for n in nodes]
    return '(' + ' '.join(parts) + ')'


def stringify(node: Node) -> str:
    if isinstance(node, Binary):
        return parenthesize(node.operator.lexeme, node.left, node.right)
    if isinstance(node, Unary):
        return parenthesize(node.operator.lexeme, node.right)
    if isinstance(node, Grouping):
        return parenthesize('group', node.node)
    if isinstance(node, Literal):
        if isinstance(node.value, String):
            return '"' + node.value.value + '"'
        return to_string(node.value)
    if isinstance(node, VariableReference):
        return node.name
    if isinstance(node, ExpressionStatement):
        return parenthesize('expr', node.value)
    if isinstance(node, PrintStatement):
        return parenthesize('print', node.value)
    if isinstance(node, VariableDeclaration):
        if node.initializer is None:
            return f"(var {node.name})"
        return parenthesize(f"var {node.name}", node.initializer)
    raise TypeError(f"stringify: unexpected node type {type(node)}")


def stringify_program(statements: List[Node]) -> str:
    return '\n'.join(stringify(s) for s in statements)
