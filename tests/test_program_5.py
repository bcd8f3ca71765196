from pathlib import Path

from lox.interpreter import run_source


EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_5_equality(capsys):
    with open(EXAMPLES / 'program_5.lox', 'r', encoding='utf-8') as f:
        source = f.read()
    result = run_source(source)
    captured = capsys.readouterr()
    assert result.ok
    assert captured.out.split('\n')[:-1] == ['true', 'false', 'true', 'true', 'true']
