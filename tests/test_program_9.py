from pathlib import Path

from oko.interpreter import parse_program, Interpreter

EXAMPLES = Path(__file__).resolve().parents[1] / 'examples'


def test_program_9_arrays(capsys):
    with open(EXAMPLES / 'program_9.oko', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    interp.run(ast)
    out_lines = capsys.readouterr().out.strip().split('\n')
    expected = [
        '[ 3, 1, 2 ]',
        '[ 3, 1, 2, 4 ]',
        '4 3 4',
        '3-2-4',
        'total: 10',
    ]
    assert out_lines == expected
