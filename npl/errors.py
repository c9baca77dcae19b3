from typing import Optional


class NplError(Exception):
    """Base class for every error raised by the NPL toolchain."""
    name = 'Error'

    def __init__(self, message: str, line: Optional[int] = None):
        if line is not None:
            message = f"{message} at line {line}"
        super().__init__(f"{self.name}: {message}")
        self.message = message
        self.line = line


class LexicalError(NplError):
    """Bad character, unterminated string or malformed number literal."""
    name = 'LexicalError'


class ParseError(NplError):
    """Unexpected token or missing expected token."""
    name = 'ParseError'


class BindingError(NplError):
    """Undefined name, redefinition, or illegal reassignment/deletion."""
    name = 'BindingError'


class EvaluationError(NplError):
    """Division by zero, calling a non-function and similar runtime faults."""
    name = 'EvaluationError'
