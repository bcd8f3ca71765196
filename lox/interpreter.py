"""Tree-walking interpreter for Lox.

`Interpreter.evaluate` reduces one AST node to a value, recursing into its
children and writing `print` output to the interpreter's output stream.
`Lox` glues the scanner, a parser front-end and the interpreter together
and reports the outcome of each run as a `RunResult` instead of a global
error flag. A `Lox` instance keeps one `Environment` for its whole life, so
bindings persist across runs of an interactive session.
"""

from __future__ import annotations

import io
import math
import sys
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, TextIO

from .ast import (
    Binary, Unary, Grouping, Literal, VariableReference,
    ExpressionStatement, PrintStatement, VariableDeclaration, Node,
)
from .environment import Environment
from .errors import Diagnostic, ErrorReporter, LoxRuntimeError
from .parser import parse
from .scanner import scan
from .tokens import Token, TokenType
from .types import (
    LiteralValue, Number, String, NIL,
    from_bool, negate, values_equal, to_string, type_name,
)


class Interpreter:
    """Core interpreter that evaluates Lox AST nodes."""
    def __init__(self, out: Optional[TextIO] = None, debug_level: int = 0, debug_file: str = 'debug.txt'):
        self.global_env = Environment()
        self.out = out
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w', encoding='utf-8') if debug_level > 0 else None

    def __enter__(self) -> 'Interpreter':
        return self

    def __exit__(self, *exc_info):
        self.close()

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg, file=sys.stderr)

    def run(self, statements: List[Node], env: Optional[Environment] = None):
        """Evaluate statements in order; the first runtime error aborts the rest."""
        if env is None:
            env = self.global_env
        for stmt in statements:
            if self.debug_level >= 1:
                self.debug(f"execute {type(stmt).__name__}")
            try:
                self.evaluate(stmt, env)
            except RecursionError:
                raise LoxRuntimeError(node_line(stmt), 'Expression nesting too deep.') from None

    def evaluate(self, node: Node, env: Environment) -> LiteralValue:
        if isinstance(node, Literal):
            return node.value
        if isinstance(node, Grouping):
            return self.evaluate(node.node, env)
        if isinstance(node, Unary):
            right = self.evaluate(node.right, env)
            result = self.apply_unary_op(node.operator, right)
            if self.debug_level >= 3:
                self.debug(f"{node.operator.lexeme} {right!r} -> {result!r}")
            return result
        if isinstance(node, Binary):
            left = self.evaluate(node.left, env)
            right = self.evaluate(node.right, env)
            result = self.apply_binary_op(node.operator, left, right)
            if self.debug_level >= 3:
                self.debug(f"{left!r} {node.operator.lexeme} {right!r} -> {result!r}")
            return result
        if isinstance(node, VariableReference):
            value = env.get(node.name, node.line)
            if self.debug_level >= 2:
                self.debug(f"lookup {node.name} = {value!r}")
            return value
        if isinstance(node, ExpressionStatement):
            self.evaluate(node.value, env)
            return NIL
        if isinstance(node, PrintStatement):
            value = self.evaluate(node.value, env)
            print(to_string(value), file=self.out if self.out is not None else sys.stdout)
            return NIL
        if isinstance(node, VariableDeclaration):
            value = NIL
            if node.initializer is not None:
                value = self.evaluate(node.initializer, env)
            env.define(node.name, value)
            if self.debug_level >= 2:
                self.debug(f"define {node.name}: {type_name(value)} = {value!r}")
            return NIL
        raise NotImplementedError(f"evaluate: unexpected node type {type(node)}")

    def apply_unary_op(self, op: Token, operand: LiteralValue) -> LiteralValue:
        if op.type == TokenType.BANG:
            return negate(operand)
        if op.type == TokenType.MINUS:
            if isinstance(operand, Number):
                return Number(-operand.value)
            raise LoxRuntimeError.at(op, 'Operand must be a number.')
        raise LoxRuntimeError.at(op, f"Unknown unary operator '{op.lexeme}'.")

    def apply_binary_op(self, op: Token, a: LiteralValue, b: LiteralValue) -> LiteralValue:
        if op.type == TokenType.EQUAL_EQUAL:
            return from_bool(values_equal(a, b))
        if op.type == TokenType.BANG_EQUAL:
            return from_bool(not values_equal(a, b))
        if op.type == TokenType.PLUS:
            if isinstance(a, Number) and isinstance(b, Number):
                return Number(a.value + b.value)
            if isinstance(a, String) and isinstance(b, String):
                return String(a.value + b.value)
            raise LoxRuntimeError.at(op, 'Operands must be two numbers or two strings.')
        if op.type in ARITHMETIC:
            x, y = self.number_operands(op, a, b)
            return Number(ARITHMETIC[op.type](x, y))
        if op.type in COMPARISON:
            x, y = self.number_operands(op, a, b)
            return from_bool(COMPARISON[op.type](x, y))
        raise LoxRuntimeError.at(op, f"Unknown operator '{op.lexeme}'.")

    def number_operands(self, op: Token, a: LiteralValue, b: LiteralValue):
        if isinstance(a, Number) and isinstance(b, Number):
            return a.value, b.value
        raise LoxRuntimeError.at(op, 'Operands must be numbers.')


def node_line(node: Optional[Node]) -> int:
    """Line of the outermost token a node carries, 0 when it has none."""
    while node is not None:
        if isinstance(node, (Binary, Unary)):
            return node.operator.line
        if isinstance(node, (VariableReference, VariableDeclaration)):
            return node.line
        if isinstance(node, Grouping):
            node = node.node
        elif isinstance(node, (ExpressionStatement, PrintStatement)):
            node = node.value
        else:
            break
    return 0


def divide(x: float, y: float) -> float:
    try:
        return x / y
    except ZeroDivisionError:
        # IEEE-754: 0/0 is NaN, anything else over zero is a signed infinity
        if math.isnan(x) or x == 0.0:
            return math.nan
        return math.copysign(math.inf, x) * math.copysign(1.0, y)


ARITHMETIC: Dict[TokenType, Callable[[float, float], float]] = {
    TokenType.MINUS: lambda x, y: x - y,
    TokenType.STAR: lambda x, y: x * y,
    TokenType.SLASH: divide,
}

COMPARISON: Dict[TokenType, Callable[[float, float], bool]] = {
    TokenType.GREATER: lambda x, y: x > y,
    TokenType.GREATER_EQUAL: lambda x, y: x >= y,
    TokenType.LESS: lambda x, y: x < y,
    TokenType.LESS_EQUAL: lambda x, y: x <= y,
}


###############################################################################
# Runner
###############################################################################


@dataclass
class RunResult:
    """Outcome of running one piece of source text."""
    statements: List[Node] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def had_error(self) -> bool:
        return any(not d.runtime for d in self.diagnostics)

    @property
    def had_runtime_error(self) -> bool:
        return any(d.runtime for d in self.diagnostics)

    @property
    def ok(self) -> bool:
        return not self.diagnostics

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 65


def descent_front_end(source: str, reporter: ErrorReporter) -> List[Node]:
    return parse(scan(source, reporter), reporter)


class Lox:
    """Runs source text against one persistent interpreter.

    `front_end` turns source text into statements, reporting syntax errors
    to the given reporter. The default is the scanner plus the
    recursive-descent parser.
    """
    def __init__(self, interpreter: Optional[Interpreter] = None,
                 reporter: Optional[ErrorReporter] = None,
                 front_end: Optional[Callable[[str, ErrorReporter], List[Node]]] = None):
        self.interpreter = interpreter if interpreter is not None else Interpreter()
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.front_end = front_end if front_end is not None else descent_front_end

    @property
    def environment(self) -> Environment:
        return self.interpreter.global_env

    def run(self, source: str) -> RunResult:
        self.reporter.reset()
        statements = self.front_end(source, self.reporter)
        if not self.reporter.had_error:
            self.execute(statements)
        return RunResult(statements, list(self.reporter.diagnostics))

    def run_statements(self, statements: List[Node]) -> RunResult:
        """Run an already parsed program, e.g. one loaded from AST JSON."""
        self.reporter.reset()
        self.execute(statements)
        return RunResult(statements, list(self.reporter.diagnostics))

    def execute(self, statements: List[Node]):
        try:
            self.interpreter.run(statements)
        except LoxRuntimeError as e:
            self.reporter.runtime_error(e)


def run_source(source: str, out: Optional[TextIO] = None, err: Optional[TextIO] = None) -> RunResult:
    """Convenience function to scan, parse and run a Lox program from a source string."""
    interpreter = Interpreter(out=out)
    return Lox(interpreter, ErrorReporter(err)).run(source)


def evaluate_source(expression: str, env: Optional[Environment] = None) -> LiteralValue:
    """Evaluate a single expression (without the trailing ';') to its value.

    Syntax errors raise `ValueError` carrying the formatted diagnostics;
    runtime errors propagate as `LoxRuntimeError`.
    """
    reporter = ErrorReporter(io.StringIO())
    statements = parse(scan(expression + ';', reporter), reporter)
    if reporter.diagnostics:
        raise ValueError('; '.join(d.format() for d in reporter.diagnostics))
    if len(statements) != 1 or not isinstance(statements[0], ExpressionStatement):
        raise ValueError(f"not a single expression: {expression!r}")
    interpreter = Interpreter()
    return interpreter.evaluate(statements[0].value, env if env is not None else interpreter.global_env)
