from pathlib import Path

from lox.interpreter import run_source


EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_9_runtime_error_aborts_run(capsys):
    with open(EXAMPLES / 'program_9.lox', 'r', encoding='utf-8') as f:
        source = f.read()
    result = run_source(source)
    captured = capsys.readouterr()
    assert result.exit_code == 65
    assert result.had_runtime_error and not result.had_error
    # the failing statement stops everything after it
    assert captured.out.strip() == 'before'
    assert captured.err.strip() == '[line 2] Error: Operands must be two numbers or two strings.'
