import pytest

from lox.environment import Environment
from lox.errors import LoxRuntimeError
from lox.types import Number, String, NIL


def test_define_and_get():
    env = Environment()
    env.define('x', Number(1.0))
    assert env.get('x') == Number(1.0)
    assert 'x' in env
    assert len(env) == 1


def test_define_overwrites_silently():
    env = Environment()
    env.define('x', Number(1.0))
    env.define('x', String('two'))
    assert env.get('x') == String('two')
    assert env.names() == ['x']


def test_nil_is_a_real_binding():
    env = Environment()
    env.define('n', NIL)
    assert env.get('n') is NIL


def test_missing_name_raises():
    env = Environment()
    with pytest.raises(LoxRuntimeError) as excinfo:
        env.get('ghost', line=7)
    assert excinfo.value.line == 7
    assert excinfo.value.message == "Undefined variable 'ghost'."
    assert 'ghost' not in env


def test_names_are_sorted():
    env = Environment()
    for name in ('b', 'a', 'c'):
        env.define(name, NIL)
    assert env.names() == ['a', 'b', 'c']
