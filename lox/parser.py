"""Recursive-descent parser for Lox.

Grammar, lowest precedence first::

    program     := declaration* EOF
    declaration := "var" IDENTIFIER ( "=" expression )? ";" | statement
    statement   := "print" expression ";" | expression ";"
    expression  := equality
    equality    := comparison ( ( "!=" | "==" ) comparison )*
    comparison  := term ( ( ">" | ">=" | "<" | "<=" ) term )*
    term        := factor ( ( "-" | "+" ) factor )*
    factor      := unary ( ( "/" | "*" ) unary )*
    unary       := ( "!" | "-" ) unary | primary
    primary     := "true" | "false" | "nil" | NUMBER | STRING
                 | IDENTIFIER | "(" expression ")"

Binary levels fold to the left. When a statement fails to parse, the error
is reported, the partial statement is dropped and the parser skips ahead
to the next statement boundary so that later errors are reported as well.
"""

from __future__ import annotations

from typing import List, Optional

from .ast import (
    Binary, Unary, Grouping, Literal, VariableReference,
    ExpressionStatement, PrintStatement, VariableDeclaration, Node,
)
from .errors import ErrorReporter, ParseError
from .tokens import Token, TokenType
from .types import Number, String, TRUE, FALSE, NIL


EQUALITY_OPS = (TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL)
COMPARISON_OPS = (TokenType.GREATER, TokenType.GREATER_EQUAL, TokenType.LESS, TokenType.LESS_EQUAL)
TERM_OPS = (TokenType.MINUS, TokenType.PLUS)
FACTOR_OPS = (TokenType.SLASH, TokenType.STAR)
UNARY_OPS = (TokenType.BANG, TokenType.MINUS)

# tokens that begin a statement; synchronization stops in front of them
STATEMENT_STARTS = (
    TokenType.CLASS, TokenType.FUN, TokenType.VAR, TokenType.FOR,
    TokenType.IF, TokenType.WHILE, TokenType.PRINT, TokenType.RETURN,
)


class Parser:
    def __init__(self, tokens: List[Token], reporter: Optional[ErrorReporter] = None):
        if not tokens or tokens[-1].type != TokenType.EOF:
            raise ValueError('token stream must end with an EOF token')
        self.tokens = tokens
        self.pos = 0
        self.reporter = reporter if reporter is not None else ErrorReporter()

    # Token cursor
    def peek(self) -> Token:
        return self.tokens[self.pos]

    def previous(self) -> Token:
        return self.tokens[self.pos - 1]

    def is_at_end(self) -> bool:
        return self.peek().type == TokenType.EOF

    def advance(self) -> Token:
        if not self.is_at_end():
            self.pos += 1
        return self.previous()

    def check(self, type_: TokenType) -> bool:
        if self.is_at_end():
            return False
        return self.peek().type == type_

    def match(self, *types: TokenType) -> Optional[Token]:
        for type_ in types:
            if self.check(type_):
                return self.advance()
        return None

    def consume(self, type_: TokenType, message: str) -> Token:
        if self.check(type_):
            return self.advance()
        raise self.error(self.peek(), message)

    def error(self, token: Token, message: str) -> ParseError:
        line = None
        if token.type == TokenType.EOF:
            # the EOF token has no line of its own
            line = self.previous().line if self.pos > 0 else 1
        self.reporter.token_error(token, message, line)
        return ParseError(message)

    def synchronize(self):
        self.advance()
        while not self.is_at_end():
            if self.previous().type == TokenType.SEMICOLON:
                return
            if self.peek().type in STATEMENT_STARTS:
                return
            self.advance()

    # Statements
    def parse(self) -> List[Node]:
        statements: List[Node] = []
        while not self.is_at_end():
            stmt = self.parse_declaration()
            if stmt is not None:
                statements.append(stmt)
        return statements

    def parse_declaration(self) -> Optional[Node]:
        try:
            if self.match(TokenType.VAR):
                return self.parse_var_decl()
            return self.parse_statement()
        except ParseError:
            self.synchronize()
            return None
        except RecursionError:
            token = self.peek()
            line = self.previous().line if token.type == TokenType.EOF else token.line
            self.reporter.error(line, 'Expression nesting too deep.')
            self.synchronize()
            return None

    def parse_var_decl(self) -> VariableDeclaration:
        name = self.consume(TokenType.IDENTIFIER, 'Expect variable name.')
        initializer: Optional[Node] = None
        if self.match(TokenType.EQUAL):
            initializer = self.parse_expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after variable declaration.")
        return VariableDeclaration(name.lexeme, initializer, name.line)

    def parse_statement(self) -> Node:
        if self.match(TokenType.PRINT):
            return self.parse_print_stmt()
        return self.parse_expr_stmt()

    def parse_print_stmt(self) -> PrintStatement:
        value = self.parse_expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after value.")
        return PrintStatement(value)

    def parse_expr_stmt(self) -> ExpressionStatement:
        value = self.parse_expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after expression.")
        return ExpressionStatement(value)

    # Expressions
    def parse_expression(self) -> Node:
        return self.parse_equality()

    def parse_equality(self) -> Node:
        node = self.parse_comparison()
        while True:
            op_token = self.match(*EQUALITY_OPS)
            if op_token is None:
                return node
            right = self.parse_comparison()
            node = Binary(node, op_token, right)

    def parse_comparison(self) -> Node:
        node = self.parse_term()
        while True:
            op_token = self.match(*COMPARISON_OPS)
            if op_token is None:
                return node
            right = self.parse_term()
            node = Binary(node, op_token, right)

    def parse_term(self) -> Node:
        node = self.parse_factor()
        while True:
            op_token = self.match(*TERM_OPS)
            if op_token is None:
                return node
            right = self.parse_factor()
            node = Binary(node, op_token, right)

    def parse_factor(self) -> Node:
        node = self.parse_unary()
        while True:
            op_token = self.match(*FACTOR_OPS)
            if op_token is None:
                return node
            right = self.parse_unary()
            node = Binary(node, op_token, right)

    def parse_unary(self) -> Node:
        op_token = self.match(*UNARY_OPS)
        if op_token is not None:
            return Unary(op_token, self.parse_unary())
        return self.parse_primary()

    def parse_primary(self) -> Node:
        if self.match(TokenType.FALSE):
            return Literal(FALSE)
        if self.match(TokenType.TRUE):
            return Literal(TRUE)
        if self.match(TokenType.NIL):
            return Literal(NIL)
        token = self.match(TokenType.NUMBER, TokenType.STRING)
        if token is not None:
            if token.type == TokenType.NUMBER:
                return Literal(Number(token.literal))
            return Literal(String(token.literal))
        token = self.match(TokenType.IDENTIFIER)
        if token is not None:
            return VariableReference(token.lexeme, token.line)
        if self.match(TokenType.LEFT_PAREN):
            expr = self.parse_expression()
            self.consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            return Grouping(expr)
        raise self.error(self.peek(), 'Expect expression.')


def parse(tokens: List[Token], reporter: Optional[ErrorReporter] = None) -> List[Node]:
    """Parse a token list into a list of statement nodes."""
    return Parser(tokens, reporter).parse()
