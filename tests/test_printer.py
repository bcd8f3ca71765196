import pytest

from lox.ast import Binary, Grouping, Literal, Node, Unary, VariableDeclaration
from lox.printer import stringify, stringify_program
from lox.tokens import Token, TokenType
from lox.types import Number, String, NIL


def test_book_example():
    expr = Binary(
        Unary(Token(TokenType.MINUS, '-', None, 1), Literal(Number(123.0))),
        Token(TokenType.STAR, '*', None, 1),
        Grouping(Literal(Number(45.67))),
    )
    assert stringify(expr) == '(* (- 123) (group 45.67))'


def test_strings_are_quoted():
    assert stringify(Literal(String('hi'))) == '"hi"'


def test_declarations():
    assert stringify(VariableDeclaration('x', None)) == '(var x)'
    assert stringify(VariableDeclaration('x', Literal(NIL))) == '(var x nil)'


def test_program_is_one_statement_per_line():
    program = [VariableDeclaration('a', None), VariableDeclaration('b', None)]
    assert stringify_program(program) == '(var a)\n(var b)'


def test_unknown_node_raises():
    with pytest.raises(TypeError):
        stringify(Node())
