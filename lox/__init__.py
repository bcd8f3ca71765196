# Lox language package
# This package provides a scanner, parsers and a tree-walking interpreter for Lox.
from .interpreter import run_source, evaluate_source, Interpreter, Lox, RunResult
from .errors import LoxError, LoxRuntimeError

__all__ = [
    'run_source',
    'evaluate_source',
    'Interpreter',
    'Lox',
    'RunResult',
    'LoxError',
    'LoxRuntimeError',
]
