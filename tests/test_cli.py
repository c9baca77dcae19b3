import json

import pytest

from npl.__main__ import main
from npl.interpreter import Interpreter
from npl.shell import Shell


@pytest.fixture
def program(tmp_path):
    path = tmp_path / 'prog.npl'
    path.write_text('var x = 2;\nprint(x * 21);\n', encoding='utf-8')
    return path


def test_run_file(program, capsys):
    main([str(program)])
    assert capsys.readouterr().out == '42\n'


def test_run_file_with_echo(program, capsys):
    main(['--echo', str(program)])
    assert capsys.readouterr().out == '2\n42\n'


def test_runtime_error_exits_non_zero(tmp_path, capsys):
    path = tmp_path / 'bad.npl'
    path.write_text('print(1);\nprint(y);\nprint(2);\n', encoding='utf-8')
    with pytest.raises(SystemExit) as exc:
        main([str(path)])
    assert exc.value.code == 1
    captured = capsys.readouterr()
    assert captured.out == '1\n'
    assert 'Runtime error: BindingError: Undefined variable y' in captured.err


def test_syntax_error_exits_non_zero(tmp_path, capsys):
    path = tmp_path / 'bad.npl'
    path.write_text('var = 1;', encoding='utf-8')
    with pytest.raises(SystemExit) as exc:
        main([str(path)])
    assert exc.value.code == 1
    assert 'ParseError' in capsys.readouterr().err


def test_missing_file(tmp_path, capsys):
    with pytest.raises(SystemExit):
        main([str(tmp_path / 'nope.npl')])
    assert 'not found' in capsys.readouterr().err


def test_tokens(program, capsys):
    main(['--tokens', str(program)])
    lines = capsys.readouterr().out.splitlines()
    assert lines[:5] == ['1 IDENT var', '1 IDENT x', '1 = =', '1 NUMBER 2', '1 ; ;']
    assert lines[-1] == '3 EOF '


def test_emit_and_run_ast(program, capsys):
    main(['--emit-ast', str(program)])
    out_path = program.with_name('prog.npl.ast.json')
    assert capsys.readouterr().out.strip() == str(out_path)
    data = json.loads(out_path.read_text(encoding='utf-8'))
    assert data['type'] == 'Program'
    main(['--ast', str(out_path)])
    assert capsys.readouterr().out == '42\n'


def test_verbose_writes_debug_file(program, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    main(['-vv', str(program)])
    assert 'declare var x: number = 2' in (tmp_path / 'debug.txt').read_text(encoding='utf-8')


def test_shell_keeps_state_and_echoes(capsys):
    shell = Shell(Interpreter())
    shell.onecmd('var x = 2;')
    shell.onecmd('x * 3')
    shell.onecmd('print("hi")')
    assert capsys.readouterr().out == '2\n6\nhi\n'


def test_shell_reports_errors_and_continues(capsys):
    shell = Shell(Interpreter())
    shell.onecmd('missing + 1')
    assert 'Undefined variable missing' in capsys.readouterr().out
    shell.onecmd('1 / 0')
    assert 'Zero division' in capsys.readouterr().out
    shell.onecmd('"still" + " here"')
    assert capsys.readouterr().out == 'still here\n'


def test_shell_tokens_and_exit(capsys):
    shell = Shell(Interpreter())
    shell.onecmd('tokens 1 + 2')
    assert capsys.readouterr().out.splitlines() == ['1 NUMBER 1', '1 + +', '1 NUMBER 2', '1 EOF ']
    assert shell.onecmd('exit') is True
    assert not shell.onecmd('')


def test_deep_recursion_in_file_and_shell(tmp_path, capsys):
    path = tmp_path / 'deep.npl'
    path.write_text(
        'function sum(n) { var r = 0; if (n > 0) { r = n + sum(n - 1); } return r; }\n'
        'print(sum(600));\n',
        encoding='utf-8',
    )
    main([str(path)])
    assert capsys.readouterr().out == '180300\n'
    shell = Shell(Interpreter())
    shell.onecmd('function down(n) { var r = n; if (n > 0) { r = down(n - 1); } return r; }')
    shell.onecmd('down(700)')
    assert capsys.readouterr().out.splitlines()[-1] == '0'
