"""CLI entry point for the NPL interpreter.

Usage:
    python -m npl [-v|-vv|-vvv|-vvvv] [<program_file>]
    python -m npl [-v...] --echo <program_file>
    python -m npl --tokens <program_file>
    python -m npl [-v...] --emit-ast <program_file>
    python -m npl [-v...] --ast <ast_json_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --echo        Print the value of every top-level statement
  --tokens      Print the token stream of a file, one token per line
  --emit-ast    Parse the given .npl file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file

Without a program file the interactive shell is started. Debug information
is written to `debug.txt` in the current directory when verbosity is greater
than zero.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from .ast_json import ast_to_obj, ast_from_obj
from .errors import NplError
from .interpreter import Interpreter, allow_deep_recursion
from .lexer import tokenize
from .parser import parse_program
from .shell import Shell, format_token


def read_source(path: str) -> str:
    program_file = Path(path)
    if not program_file.exists():
        print(f"Error: file {program_file} not found", file=sys.stderr)
        sys.exit(1)
    with open(program_file, 'r', encoding='utf-8') as f:
        return f.read()


def execute(ast_program, debug_level: int, show_output: bool = False) -> None:
    allow_deep_recursion()
    interpreter = Interpreter(debug_level=debug_level)
    try:
        interpreter.interpret(ast_program.body, show_output=show_output)
    except (NplError, RecursionError) as e:
        print(f"Runtime error: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        interpreter.close()


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog='npl', description="NPL language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--echo', action='store_true', help='print the value of every top-level statement')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--tokens', metavar='NPL_FILE', help='print the tokens of the given .npl file')
    group.add_argument('--emit-ast', metavar='NPL_FILE', help='emit AST JSON for the given .npl file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='NPL program file (.npl) to execute')
    args = parser.parse_args(argv)

    # Token dump mode
    if args.tokens:
        source = read_source(args.tokens)
        try:
            for token in tokenize(source):
                print(format_token(token))
        except NplError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        return

    # Emit AST mode
    if args.emit_ast:
        source = read_source(args.emit_ast)
        try:
            ast_program = parse_program(source)
        except NplError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        program_file = Path(args.emit_ast)
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(ast_to_obj(ast_program), out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    # Execute from AST JSON
    if args.ast:
        ast_path = Path(args.ast)
        if not ast_path.exists():
            print(f"Error: file {ast_path} not found", file=sys.stderr)
            sys.exit(1)
        with open(ast_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        execute(ast_from_obj(data), args.v, args.echo)
        return

    # No program: interactive mode
    if not args.program:
        Shell(Interpreter(debug_level=args.v)).cmdloop()
        return

    source = read_source(args.program)
    try:
        ast_program = parse_program(source)
    except NplError as e:
        print(f"Runtime error: {e}", file=sys.stderr)
        sys.exit(1)
    execute(ast_program, args.v, args.echo)


if __name__ == '__main__':
    main()
