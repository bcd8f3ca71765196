"""Abstract Syntax Tree (AST) definitions for Lox.

The AST classes defined in this module represent the syntactic structure
of parsed Lox programs. Nodes carry no behaviour of their own; the
interpreter, the printer and the JSON codec each match on them. Every node
owns its children outright, so a parsed program is always a tree.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .tokens import Token
from .types import LiteralValue


@dataclass
class Node:
    """Base class for all AST nodes."""
    pass


# Expressions

@dataclass
class Binary(Node):
    left: Node
    operator: Token
    right: Node


@dataclass
class Unary(Node):
    operator: Token
    right: Node


@dataclass
class Grouping(Node):
    node: Node


@dataclass
class Literal(Node):
    value: LiteralValue


@dataclass
class VariableReference(Node):
    name: str
    line: int = 0


# Statements

@dataclass
class ExpressionStatement(Node):
    value: Node


@dataclass
class PrintStatement(Node):
    value: Node


@dataclass
class VariableDeclaration(Node):
    name: str
    initializer: Optional[Node]  # None for `var x;`
    line: int = 0
