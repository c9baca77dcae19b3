from pathlib import Path

from npl.interpreter import parse_program, Interpreter

EXAMPLES = Path(__file__).parent.parent / 'examples'


def test_program_4(capsys):
    with open(EXAMPLES / 'program_4.npl', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    interp.run(ast)
    out = capsys.readouterr().out.strip()
    assert out == '\n'.join(['1', '2', '3', 'Hello, NPL!', '3628800'])
