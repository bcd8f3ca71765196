import io
import json
import math

import pytest

from lox.ast import Literal, PrintStatement
from lox.ast_json import ast_from_obj, ast_to_obj, program_from_obj, program_to_obj
from lox.errors import ErrorReporter
from lox.parser import parse
from lox.scanner import scan
from lox.types import Number


SOURCE = '''
var greeting = "hello";
var nothing;
print greeting + " world";
print -(1 + 2) * 3 >= 4 == !false;
nothing != nil;
'''


def parse_source(source):
    reporter = ErrorReporter(io.StringIO())
    statements = parse(scan(source, reporter), reporter)
    assert not reporter.diagnostics
    return statements


def test_program_survives_json_round_trip():
    statements = parse_source(SOURCE)
    text = json.dumps(program_to_obj(statements))
    assert program_from_obj(json.loads(text)) == statements


def test_object_shape():
    obj = ast_to_obj(parse_source('print 1 + x;')[0])
    assert obj == {
        "type": "PrintStatement",
        "value": {
            "type": "Binary",
            "left": {"type": "Literal", "value": {"__value__": "Number", "value": 1.0}},
            "operator": {"type": "PLUS", "lexeme": "+", "literal": None, "line": 1},
            "right": {"type": "VariableReference", "name": "x", "line": 1},
        },
    }


def test_non_finite_numbers_are_encoded_as_strings():
    node = PrintStatement(Literal(Number(-math.inf)))
    obj = ast_to_obj(node)
    assert obj["value"]["value"] == {"__value__": "Number", "value": "-inf"}
    assert ast_from_obj(json.loads(json.dumps(obj))) == node


def test_unknown_node_type_raises():
    with pytest.raises(ValueError):
        ast_from_obj({"type": "WhileStatement"})


def test_program_from_obj_requires_program():
    with pytest.raises(ValueError):
        program_from_obj({"type": "Grouping", "node": None})
