import builtins
from typing import Callable, Optional


class BasicIO:
    """Console channel used by the root library and the result echo.

    `write` receives one line of text and `read` receives a prompt and returns
    one line of input. Both default to the Python builtins, looked up at
    call time so redirected stdout/stdin are honoured.
    """
    CLEAR_SCREEN = '\033[2J\033[H'

    def __init__(self, write: Optional[Callable[[str], None]] = None,
                 read: Optional[Callable[[str], str]] = None):
        self._write = write
        self._read = read

    def write_line(self, text: str):
        if self._write is not None:
            self._write(text)
        else:
            builtins.print(text)

    def read_line(self, prompt: str) -> str:
        try:
            if self._read is not None:
                return self._read(prompt)
            return builtins.input(prompt)
        except EOFError:
            return ''

    def clear(self):
        if self._write is not None:
            self._write(self.CLEAR_SCREEN)
        else:
            builtins.print(self.CLEAR_SCREEN, end='', flush=True)
