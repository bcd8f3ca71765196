"""Interactive prompt for Lox. Uses cmd as backend."""

import cmd

from lox.interpreter import Lox
from lox.types import to_string


class Shell(cmd.Cmd):
    """Lox read-eval-print loop.

    Every line is scanned, parsed and run against the same `Lox` runner,
    so variables declared on one line are visible on the next. Errors are
    reported and then forgotten; the prompt never exits because of them.
    """
    intro = "Lox interpreter :: Python backend\nType '.help' for more information, '.exit' or Ctrl-D to leave."
    prompt = "> "

    def __init__(self, lox: Lox, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.lox = lox
        self.last_result = None

    def parseline(self, line):
        # only dot-prefixed words are shell commands; everything else is Lox
        stripped = line.strip()
        if stripped == 'EOF':  # cmdloop's end-of-input marker
            return 'EOF', '', stripped
        if stripped.startswith('.'):
            return super().parseline(stripped[1:])
        return None, None, line

    def default(self, line):
        """Runs one line of Lox source."""
        self.last_result = self.lox.run(line)

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return False

    def do_env(self, arg):
        """Lists the variables defined so far."""
        env = self.lox.environment
        for name in env.names():
            print(f"{name} = {to_string(env.get(name))}", file=self.stdout)

    def do_help(self, arg):
        """Short intro instead of cmd's command listing."""
        print("Type Lox statements, e.g. 'var x = 1 + 2;' then 'print x;'.\n"
              "Declarations persist for the whole session.\n\n"
              "Commands:\n"
              "  .env    list defined variables\n"
              "  .exit   leave the interpreter", file=self.stdout)

    def do_EOF(self, arg):
        """Exits interpreter."""
        print(file=self.stdout)
        return True

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
