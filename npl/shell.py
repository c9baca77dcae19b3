"""Interactive mode for the NPL interpreter. Uses cmd as backend."""

import cmd

from termcolor import colored

from .errors import NplError
from .interpreter import Interpreter, allow_deep_recursion
from .lexer import tokenize
from .parser import parse_program


def format_token(token) -> str:
    return f"{token.line} {token.type} {token.value}"


class Shell(cmd.Cmd):
    """NPL read-eval-print loop.

    Every line is parsed and run in the same root environment, so bindings
    survive from one prompt to the next. Non-null results are echoed.
    """
    intro = "Welcome to the NPL REPL!\nType 'exit' to quit."
    prompt = "> "

    def __init__(self, interpreter=None, *args, **kwargs):
        super().__init__(*args, **kwargs)
        allow_deep_recursion()
        self.interpreter = interpreter if interpreter is not None else Interpreter()

    def report(self, error: Exception):
        print(colored(str(error), "red", attrs=["bold"]))

    def default(self, line):
        """Runs an NPL source line."""
        # cmd.Cmd exits on an uncaught exception
        try:
            program = parse_program(line)
            self.interpreter.interpret(program.body, show_output=True)
        except NplError as e:
            self.report(e)
        except RecursionError:
            self.report(NplError('maximum recursion depth exceeded'))

    def do_tokens(self, arg):
        """Prints the tokens of the given source, one per line."""
        try:
            for token in tokenize(arg):
                print(format_token(token))
        except NplError as e:
            self.report(e)

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True

    def postloop(self):
        self.interpreter.close()
