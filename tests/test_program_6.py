from pathlib import Path

from npl.interpreter import parse_program, Interpreter

EXAMPLES = Path(__file__).parent.parent / 'examples'


def test_program_6(capsys):
    with open(EXAMPLES / 'program_6.npl', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    interp.run(ast)
    out = capsys.readouterr().out.strip()
    assert out == '\n'.join([
        '[1, two, true, null]', 'two', 'null', '4', '3', 'n',
        'array native_function number', '43 3.5 false',
    ])
