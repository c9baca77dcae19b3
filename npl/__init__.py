# NPL language package
# This package provides a lexer, parser and tree-walking interpreter for NPL.
from .errors import NplError, LexicalError, ParseError, BindingError, EvaluationError
from .lexer import Token, tokenize
from .parser import parse, parse_program
from .interpreter import Interpreter, run_program, run_file

__all__ = [
    'Token',
    'tokenize',
    'parse',
    'parse_program',
    'Interpreter',
    'run_program',
    'run_file',
    'NplError',
    'LexicalError',
    'ParseError',
    'BindingError',
    'EvaluationError',
]
