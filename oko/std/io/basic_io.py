import builtins
from typing import Optional


class BasicIO:
    """Host-side console and file access used by the io module."""

    def write(self, text: str, end: str = '\n'):
        print(text, end=end, flush=True)

    def read_line(self) -> str:
        try:
            return builtins.input('')
        except EOFError:
            return ''

    def read_text_file(self, filename: str) -> Optional[str]:
        try:
            with open(filename, 'r', encoding='utf-8') as f:
                return f.read()
        except (OSError, UnicodeError):
            return None

    def write_text_file(self, filename: str, data: str) -> bool:
        try:
            with open(filename, 'w', encoding='utf-8') as f:
                f.write(data)
            return True
        except OSError:
            return False
