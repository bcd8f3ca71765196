"""CLI entry point for the Lox interpreter.

Usage:
    python -m lox [-v|-vv|-vvv] [script]
    python -m lox [-v...] --print-ast <script>
    python -m lox [-v...] --emit-ast <script>
    python -m lox [-v...] --ast <ast_json_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --parser      Front-end to use: 'descent' (default) or 'lark'
  --print-ast   Parse the script and print its AST instead of running it
  --emit-ast    Parse the script and write an AST JSON file next to it
  --ast         Execute a previously emitted AST JSON file

Without a script the interpreter starts an interactive prompt. Exit codes:
64 for a bad invocation, 65 when the script reported any error, 66 when
an input file does not exist.

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero.
"""

import argparse
import json
import sys
from pathlib import Path

from .ast_json import program_from_obj, program_to_obj
from .errors import ErrorReporter
from .interpreter import Interpreter, Lox, descent_front_end
from .lark_parser import parse_program as lark_front_end
from .printer import stringify_program
from .shell import Shell

EX_USAGE = 64
EX_DATAERR = 65
EX_NOINPUT = 66

FRONT_ENDS = {
    'descent': descent_front_end,
    'lark': lark_front_end,
}


def read_source(path: Path) -> str:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(EX_NOINPUT)
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(prog='lox', description="Lox language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--parser', choices=sorted(FRONT_ENDS), default='descent', help='parser front-end')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--print-ast', action='store_true', help='print the AST of the script instead of running it')
    group.add_argument('--emit-ast', action='store_true', help='emit AST JSON for the script')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('scripts', nargs='*', metavar='script', help='Lox script to run')
    args = parser.parse_args(argv)

    if len(args.scripts) > 1:
        print("Usage: lox [script]")
        sys.exit(EX_USAGE)
    script = Path(args.scripts[0]) if args.scripts else None
    front_end = FRONT_ENDS[args.parser]

    # Print or emit AST mode
    if args.print_ast or args.emit_ast:
        if script is None:
            parser.error('--print-ast/--emit-ast need a script')
        reporter = ErrorReporter()
        statements = front_end(read_source(script), reporter)
        if reporter.had_error:
            sys.exit(EX_DATAERR)
        try:
            if args.print_ast:
                text = stringify_program(statements)
            else:
                data = program_to_obj(statements)
        except RecursionError:
            print(f"Error: {script} nests too deeply", file=sys.stderr)
            sys.exit(EX_DATAERR)
        if args.print_ast:
            if statements:
                print(text)
            return
        out_path = script.with_name(script.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(data, out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    with Interpreter(debug_level=args.v) as interpreter:
        lox = Lox(interpreter, front_end=front_end)

        # Execute from AST JSON
        if args.ast:
            ast_path = Path(args.ast)
            if not ast_path.exists():
                print(f"Error: file {ast_path} not found", file=sys.stderr)
                sys.exit(EX_NOINPUT)
            try:
                with open(ast_path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
                statements = program_from_obj(data)
            except (TypeError, ValueError, KeyError, RecursionError) as e:
                print(f"Error: invalid AST file {ast_path}: {e}", file=sys.stderr)
                sys.exit(EX_DATAERR)
            result = lox.run_statements(statements)
            if result.exit_code:
                sys.exit(result.exit_code)
            return

        # Default: run a script, or start the prompt
        if script is not None:
            result = lox.run(read_source(script))
            if result.exit_code:
                sys.exit(result.exit_code)
            return

        Shell(lox).cmdloop()


if __name__ == '__main__':
    main()
