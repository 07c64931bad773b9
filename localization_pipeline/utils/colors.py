"""ANSI color codes for terminal output."""

import os
import sys


class Colors:
    """ANSI color codes used by the CLI and the console log formatter."""

    HEADER = '\033[95m'
    OKBLUE = '\033[94m'
    OKCYAN = '\033[96m'
    OKGREEN = '\033[92m'
    WARNING = '\033[93m'
    FAIL = '\033[91m'
    DIM = '\033[2m'
    ENDC = '\033[0m'
    BOLD = '\033[1m'

    @staticmethod
    def supported(stream=None) -> bool:
        """Return True when ANSI colors should be written to the stream."""
        if os.environ.get('NO_COLOR'):
            return False
        stream = stream or sys.stdout
        return hasattr(stream, 'isatty') and stream.isatty()

    @classmethod
    def wrap(cls, color: str, text: str) -> str:
        """Wrap text in a color code and reset afterwards."""
        return f"{color}{text}{cls.ENDC}"

    @classmethod
    def success(cls, text: str) -> str:
        return cls.wrap(cls.OKGREEN, text)

    @classmethod
    def error(cls, text: str) -> str:
        return cls.wrap(cls.FAIL, text)

    @classmethod
    def warning(cls, text: str) -> str:
        return cls.wrap(cls.WARNING, text)

    @classmethod
    def info(cls, text: str) -> str:
        return cls.wrap(cls.OKCYAN, text)

    @classmethod
    def bold(cls, text: str) -> str:
        return cls.wrap(cls.BOLD, text)

    @classmethod
    def dim(cls, text: str) -> str:
        """Return text dimmed, used for truncated values."""
        return cls.wrap(cls.DIM, text)
