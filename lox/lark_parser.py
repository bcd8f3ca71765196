"""Grammar-driven parser for Lox built on Lark.

This is a second front-end for the same language. The source text is fed
into a Lark LALR parser configured with a grammar for Lox, and the parse
tree is transformed into the same AST dataclasses the recursive-descent
parser builds, with operator tokens carrying the same `TokenType`s and
line numbers. Both front-ends must agree on every valid program.

Unlike the recursive-descent parser this front-end does not recover: the
first syntax error is reported and no statements are returned.

The `parse_program` function is the public entry point.
"""

from __future__ import annotations

from typing import List, Optional

from lark import Lark, Transformer, v_args
from lark.exceptions import UnexpectedCharacters, UnexpectedInput, UnexpectedToken, VisitError

from .ast import (
    Binary, Unary, Grouping, Literal, VariableReference,
    ExpressionStatement, PrintStatement, VariableDeclaration, Node,
)
from .errors import Diagnostic, ErrorReporter
from .tokens import Token, TokenType
from .types import Number, String, TRUE, FALSE, NIL


LOX_GRAMMAR = r"""
    start: declaration*

    ?declaration: var_decl
                | statement

    var_decl: "var" IDENTIFIER ["=" expression] ";"

    ?statement: print_stmt
              | expr_stmt

    print_stmt: "print" expression ";"
    expr_stmt: expression ";"

    // Expressions with precedence, lowest first
    ?expression: equality
    ?equality: comparison
             | equality (BANG_EQUAL | EQUAL_EQUAL) comparison -> binary
    ?comparison: term
               | comparison (GREATER | GREATER_EQUAL | LESS | LESS_EQUAL) term -> binary
    ?term: factor
         | term (MINUS | PLUS) factor -> binary
    ?factor: unary
           | factor (SLASH | STAR) unary -> binary
    ?unary: (BANG | MINUS) unary -> unary_op
          | primary
    ?primary: "true" -> true
            | "false" -> false
            | "nil" -> nil
            | NUMBER -> number
            | STRING -> string
            | IDENTIFIER -> variable
            | "(" expression ")" -> grouping

    // Operators, named after their TokenType
    BANG_EQUAL: "!="
    EQUAL_EQUAL: "=="
    GREATER_EQUAL: ">="
    GREATER: ">"
    LESS_EQUAL: "<="
    LESS: "<"
    MINUS: "-"
    PLUS: "+"
    SLASH: "/"
    STAR: "*"
    BANG: "!"

    // Reserved words the grammar has no use for are never identifiers
    IDENTIFIER: /(?!(?:and|class|else|for|fun|if|or|return|super|this|while)\b)[A-Za-z_][A-Za-z0-9_]*/
    NUMBER: /[0-9]+(\.[0-9]+)?/
    STRING: /"[^"]*"/

    COMMENT: /\/\/[^\n]*/
    %ignore COMMENT
    %import common.WS
    %ignore WS
"""


LOX_PARSER = Lark(
    LOX_GRAMMAR,
    parser='lalr',
    lexer='basic',
    propagate_positions=True,
    maybe_placeholders=True,
)


def make_token(tok) -> Token:
    """Convert a Lark operator token into a Lox token."""
    return Token(TokenType[tok.type], str(tok), None, tok.line)


@v_args(inline=True)
class LoxTransformer(Transformer):
    """Transform a Lark parse tree into Lox AST nodes."""

    def start(self, *statements):
        return list(statements)

    def var_decl(self, name, initializer):
        return VariableDeclaration(str(name), initializer, name.line)

    def print_stmt(self, value):
        return PrintStatement(value)

    def expr_stmt(self, value):
        return ExpressionStatement(value)

    def binary(self, left, op, right):
        return Binary(left, make_token(op), right)

    def unary_op(self, op, right):
        return Unary(make_token(op), right)

    def grouping(self, node):
        return Grouping(node)

    def true(self):
        return Literal(TRUE)

    def false(self):
        return Literal(FALSE)

    def nil(self):
        return Literal(NIL)

    def number(self, tok):
        return Literal(Number(float(tok)))

    def string(self, tok):
        return Literal(String(str(tok)[1:-1]))

    def variable(self, tok):
        return VariableReference(str(tok), tok.line)


def report_syntax_error(e: UnexpectedInput, reporter: ErrorReporter):
    if isinstance(e, UnexpectedCharacters):
        if e.char == '"':
            # STRING only matches with its closing quote
            reporter.error(e.line, 'Unterminated string.')
        else:
            reporter.error(e.line, 'Unexpected character.')
    elif isinstance(e, UnexpectedToken):
        tok = e.token
        line = tok.line if getattr(tok, 'line', None) else 1
        where = ' at end' if tok.type == '$END' else f" at '{tok}'"
        reporter.report(Diagnostic(line, where, 'Unexpected token.'))
    else:
        reporter.report(Diagnostic(getattr(e, 'line', None) or 1, '', 'Unexpected input.'))


def parse_program(source: str, reporter: Optional[ErrorReporter] = None) -> List[Node]:
    """Parse Lox source into a list of statements using the Lark grammar."""
    if reporter is None:
        reporter = ErrorReporter()
    try:
        tree = LOX_PARSER.parse(source)
    except UnexpectedInput as e:
        report_syntax_error(e, reporter)
        return []
    transformer = LoxTransformer()
    statements = []
    for child in tree.children:
        try:
            statements.append(transformer.transform(child))
        except VisitError as e:
            if not isinstance(e.orig_exc, RecursionError):
                raise
            reporter.error(child.meta.line, 'Expression nesting too deep.')
            return []
        except RecursionError:
            reporter.error(child.meta.line, 'Expression nesting too deep.')
            return []
    return statements
