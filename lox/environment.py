from typing import Dict, List

from lox.errors import LoxRuntimeError
from lox.types import LiteralValue


class Environment:
    """The single global scope mapping variable names to values.

    There is no nesting and no way to remove a binding. Defining a name
    that already exists silently replaces its value.
    """
    def __init__(self):
        self.values: Dict[str, LiteralValue] = {}

    def __contains__(self, name: str) -> bool:
        return name in self.values

    def __len__(self) -> int:
        return len(self.values)

    def names(self) -> List[str]:
        return sorted(self.values)

    def define(self, name: str, value: LiteralValue):
        self.values[name] = value

    def get(self, name: str, line: int = 0) -> LiteralValue:
        if name in self.values:
            return self.values[name]
        raise LoxRuntimeError(line, f"Undefined variable '{name}'.")
