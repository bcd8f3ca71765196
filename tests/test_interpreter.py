import io
import math

import pytest

from lox.ast import ExpressionStatement, Literal, PrintStatement, Unary, VariableDeclaration
from lox.environment import Environment
from lox.errors import ErrorReporter, LoxRuntimeError
from lox.interpreter import Interpreter, Lox, evaluate_source, run_source
from lox.tokens import Token, TokenType
from lox.types import Number, String, TRUE, FALSE, NIL


@pytest.mark.parametrize('expression, expected', [
    ('1 + 2 * 3', Number(7.0)),
    ('(1 + 2) * 3', Number(9.0)),
    ('10 - 4 / 2', Number(8.0)),
    ('2 * -3', Number(-6.0)),
    ('0.1 + 0.2', Number(0.1 + 0.2)),
    ('"a" + "b" + "c"', String('abc')),
    ('!nil', TRUE),
    ('!false', TRUE),
    ('!0', FALSE),
    ('!!"x"', TRUE),
    ('1 == 1', TRUE),
    ('"1" == 1', FALSE),
    ('"1" != 1', TRUE),
    ('nil == nil', TRUE),
    ('nil == false', FALSE),
    ('true == true', TRUE),
    ('"lox" == "lox"', TRUE),
    ('1 < 2', TRUE),
    ('2 <= 2', TRUE),
    ('3 > 4', FALSE),
    ('5 >= 5.5', FALSE),
    ('(((1)))', Number(1.0)),
])
def test_expression_values(expression, expected):
    assert evaluate_source(expression) == expected


def test_division_by_zero_follows_ieee():
    assert evaluate_source('1 / 0') == Number(math.inf)
    assert evaluate_source('-1 / 0') == Number(-math.inf)
    assert math.isnan(evaluate_source('0 / 0').value)


def test_nan_is_not_equal_to_itself():
    env = Environment()
    env.define('n', Number(math.nan))
    assert evaluate_source('n == n', env) == FALSE
    assert evaluate_source('n != n', env) == TRUE


@pytest.mark.parametrize('expression, message', [
    ('1 + "a"', 'Operands must be two numbers or two strings.'),
    ('"a" + nil', 'Operands must be two numbers or two strings.'),
    ('"a" * 2', 'Operands must be numbers.'),
    ('true - 1', 'Operands must be numbers.'),
    ('"a" / "b"', 'Operands must be numbers.'),
    ('"a" < "b"', 'Operands must be numbers.'),
    ('nil >= 1', 'Operands must be numbers.'),
    ('-"a"', 'Operand must be a number.'),
    ('-nil', 'Operand must be a number.'),
    ('missing', "Undefined variable 'missing'."),
])
def test_type_mismatches_raise(expression, message):
    with pytest.raises(LoxRuntimeError) as excinfo:
        evaluate_source(expression)
    assert excinfo.value.message == message
    assert excinfo.value.line == 1


def test_syntax_error_in_expression_raises_value_error():
    with pytest.raises(ValueError):
        evaluate_source('1 +')


def test_left_operand_is_evaluated_first():
    # the left operand's failure is the one reported
    with pytest.raises(LoxRuntimeError) as excinfo:
        evaluate_source('left + right')
    assert excinfo.value.message == "Undefined variable 'left'."


def test_statements_evaluate_to_nil(capsys):
    interpreter = Interpreter()
    env = Environment()
    assert interpreter.evaluate(ExpressionStatement(Literal(Number(1.0))), env) is NIL
    assert interpreter.evaluate(PrintStatement(Literal(String('hi'))), env) is NIL
    assert interpreter.evaluate(VariableDeclaration('v', Literal(TRUE)), env) is NIL
    assert env.get('v') == TRUE
    assert capsys.readouterr().out == 'hi\n'


def test_print_writes_to_given_stream():
    out = io.StringIO()
    result = run_source('print 1; print 2.5; print "s"; print true; print false; print nil; print -0;', out=out)
    assert result.ok
    assert out.getvalue() == '1\n2.5\ns\ntrue\nfalse\nnil\n-0\n'


def test_variable_round_trip(capsys):
    lox = Lox()
    result = lox.run('var x = 5; print x;')
    assert result.ok
    assert capsys.readouterr().out == '5\n'
    assert evaluate_source('x', lox.environment) == Number(5.0)


def test_undefined_variable_is_a_runtime_error(capsys):
    result = run_source('print y;')
    assert result.had_runtime_error
    assert result.exit_code == 65
    assert capsys.readouterr().err == "[line 1] Error: Undefined variable 'y'.\n"


def test_redeclaration_overwrites(capsys):
    run_source('var x = 1; var x = 2; print x;')
    assert capsys.readouterr().out == '2\n'


def test_declaration_without_initializer_binds_nil(capsys):
    lox = Lox()
    result = lox.run('var y; print y;')
    assert result.ok
    assert 'y' in lox.environment
    assert lox.environment.get('y') is NIL
    assert capsys.readouterr().out == 'nil\n'


def test_initializer_may_reference_earlier_bindings(capsys):
    run_source('var a = 2; var b = a * a; var a = b + a; print a;')
    assert capsys.readouterr().out == '6\n'


def test_runtime_error_aborts_remaining_statements(capsys):
    lox = Lox()
    result = lox.run('var a = 1;\nprint a;\na + nil;\nvar b = 2;')
    captured = capsys.readouterr()
    assert captured.out == '1\n'
    assert captured.err == '[line 3] Error: Operands must be two numbers or two strings.\n'
    assert 'a' in lox.environment
    assert 'b' not in lox.environment
    assert result.exit_code == 65


def test_scan_error_prevents_evaluation(capsys):
    result = run_source('print 1; @')
    captured = capsys.readouterr()
    assert captured.out == ''
    assert result.had_error and not result.had_runtime_error
    assert len(result.statements) == 1


def test_malformed_input_does_not_raise(capsys):
    result = run_source('1 +')
    assert result.had_error
    assert capsys.readouterr().err == '[line 1] Error at end: Expect expression.\n'


def test_environment_persists_across_runs(capsys):
    lox = Lox()
    lox.run('var a = 1;')
    lox.run('var b = a + 1;')
    lox.run('print a + b;')
    assert capsys.readouterr().out == '3\n'


def test_errors_are_forgotten_between_runs():
    lox = Lox(reporter=ErrorReporter(io.StringIO()))
    assert lox.run('print nope;').exit_code == 65
    result = lox.run('print 1;')
    assert result.ok
    assert result.diagnostics == []


def test_run_statements_reports_runtime_errors(capsys):
    err = io.StringIO()
    lox = Lox(reporter=ErrorReporter(err))
    minus = Token(TokenType.MINUS, '-', None, 4)
    result = lox.run_statements([
        PrintStatement(Literal(Number(1.0))),
        ExpressionStatement(Unary(minus, Literal(NIL))),
        PrintStatement(Literal(Number(2.0))),
    ])
    assert result.had_runtime_error
    assert result.exit_code == 65
    assert capsys.readouterr().out == '1\n'
    assert err.getvalue() == '[line 4] Error: Operand must be a number.\n'


def test_run_statements_without_errors_is_ok():
    lox = Lox(reporter=ErrorReporter(io.StringIO()))
    result = lox.run_statements([PrintStatement(Literal(Number(1.0))), ExpressionStatement(Literal(NIL))])
    assert result.ok


def test_long_operator_chain_is_a_runtime_error(capsys):
    lox = Lox()
    result = lox.run('var before = 1;\nprint ' + ' + '.join(['1'] * 1500) + ';\nvar after = 2;')
    assert result.had_runtime_error
    assert result.exit_code == 65
    assert capsys.readouterr().err == '[line 2] Error: Expression nesting too deep.\n'
    assert 'before' in lox.environment
    assert 'after' not in lox.environment


def test_deeply_nested_grouping_is_a_syntax_error(capsys):
    source = 'print ' + '(' * 200 + '1' + ')' * 200 + ';\nprint "next";'
    result = run_source(source)
    captured = capsys.readouterr()
    assert result.had_error
    assert not result.had_runtime_error
    assert result.exit_code == 65
    assert captured.err == '[line 1] Error: Expression nesting too deep.\n'
    assert captured.out == ''
    assert len(result.statements) == 1


def test_shallow_grouping_still_parses():
    assert evaluate_source('(' * 50 + '1' + ')' * 50) == Number(1.0)


def test_debug_log(tmp_path):
    debug_file = tmp_path / 'debug.txt'
    with Interpreter(out=io.StringIO(), debug_level=3, debug_file=str(debug_file)) as interpreter:
        Lox(interpreter).run('var x = 1 + 2; print -x;')
    log = debug_file.read_text(encoding='utf-8')
    assert 'execute VariableDeclaration' in log
    assert 'define x: number = Number(3.0)' in log
    assert 'lookup x = Number(3.0)' in log
    assert 'Number(1.0) + Number(2.0) -> Number(3.0)' in log


def test_no_debug_file_without_verbosity(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    Interpreter().close()
    assert not (tmp_path / 'debug.txt').exists()


def test_small_quotients_print_without_exponent(capsys):
    run_source('print 1 / 10000000;')
    assert capsys.readouterr().out == '0.0000001\n'
