import sys
from dataclasses import dataclass
from typing import List, Optional, TextIO

from lox.tokens import Token, TokenType


@dataclass(frozen=True)
class Diagnostic:
    """One reported error, formatted as `[line N] Error<where>: <message>`."""
    line: int
    where: str
    message: str
    runtime: bool = False

    def format(self) -> str:
        return f"[line {self.line}] Error{self.where}: {self.message}"


class LoxError(Exception):
    """Base class for errors raised while running Lox code."""


class ParseError(LoxError):
    """Raised inside the parser to unwind to the next statement boundary."""


class LoxRuntimeError(LoxError):
    """Exception type used to abort evaluation on a runtime error."""
    def __init__(self, line: int, message: str):
        super().__init__(f"[line {line}] {message}")
        self.line = line
        self.message = message

    @classmethod
    def at(cls, token: Token, message: str) -> 'LoxRuntimeError':
        return cls(token.line, message)


class ErrorReporter:
    """Collects diagnostics and writes them to the error stream.

    The stream defaults to whatever `sys.stderr` is at the time of writing,
    so pytest's capture fixtures see the output.
    """
    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream
        self.diagnostics: List[Diagnostic] = []

    @property
    def had_error(self) -> bool:
        return any(not d.runtime for d in self.diagnostics)

    @property
    def had_runtime_error(self) -> bool:
        return any(d.runtime for d in self.diagnostics)

    def error(self, line: int, message: str) -> Diagnostic:
        return self.report(Diagnostic(line, '', message))

    def token_error(self, token: Token, message: str, line: Optional[int] = None) -> Diagnostic:
        if token.type == TokenType.EOF:
            where = ' at end'
        else:
            where = f" at '{token.lexeme}'"
        return self.report(Diagnostic(token.line if line is None else line, where, message))

    def runtime_error(self, err: LoxRuntimeError) -> Diagnostic:
        return self.report(Diagnostic(err.line, '', err.message, runtime=True))

    def report(self, diagnostic: Diagnostic) -> Diagnostic:
        self.diagnostics.append(diagnostic)
        stream = self.stream if self.stream is not None else sys.stderr
        print(diagnostic.format(), file=stream)
        return diagnostic

    def reset(self):
        self.diagnostics = []
