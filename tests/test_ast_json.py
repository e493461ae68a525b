import json
from pathlib import Path

import pytest

from oko.ast_json import ast_from_obj, ast_to_obj
from oko.interpreter import parse_program, Interpreter

EXAMPLES = Path(__file__).resolve().parents[1] / 'examples'


@pytest.mark.parametrize('name', ['program_6.oko', 'program_7.oko', 'program_9.oko', 'program_13.oko'])
def test_ast_survives_json(name):
    with open(EXAMPLES / name, 'r', encoding='utf-8') as f:
        source = f.read()
    program = parse_program(source)
    data = json.loads(json.dumps(ast_to_obj(program)))
    assert ast_from_obj(data) == program


def test_loaded_ast_runs(capsys):
    program = parse_program('import io; funct sq(n) { return n * n; } io::println(sq(7));')
    data = json.loads(json.dumps(ast_to_obj(program)))
    Interpreter().run(ast_from_obj(data))
    assert capsys.readouterr().out.strip() == '49'


def test_operators_are_stored_by_spelling():
    obj = ast_to_obj(parse_program('x += 1 ^ 2;'))
    stmt = obj['body'][0]
    assert stmt['operator'] == '+='
    assert stmt['value']['operator'] == '^'


def test_unknown_node_type():
    with pytest.raises(ValueError):
        ast_from_obj({'type': 'Lambda'})
