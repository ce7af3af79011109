"""Terminal Output Formatting Package"""

import os
import re
import sys
import threading

RESET = '\033[0m'
BOLD = '\033[1m'
DIM = '\033[2m'
RED = '\033[31m'
GREEN = '\033[32m'
YELLOW = '\033[33m'
MAGENTA = '\033[35m'
CYAN = '\033[36m'


def _supports_color() -> bool:
    if os.environ.get('NO_COLOR'):
        return False
    if os.environ.get('FORCE_COLOR'):
        return True
    if not sys.stdout.isatty():
        return False
    if sys.platform == 'win32':
        # Turn on VT processing so the console honours ANSI codes
        try:
            import ctypes
            kernel32 = ctypes.windll.kernel32
            kernel32.SetConsoleMode(kernel32.GetStdHandle(-11), 7)
        except (AttributeError, OSError):
            return False
    return True


def _can_print(text: str) -> bool:
    try:
        text.encode(sys.stdout.encoding or 'utf-8')
    except (UnicodeEncodeError, LookupError):
        return False
    return True


COLORS_ENABLED = _supports_color()
UNICODE_ENABLED = _can_print('✓✗⠋')

CHECK = '✓' if UNICODE_ENABLED else '[OK]'
CROSS = '✗' if UNICODE_ENABLED else '[X]'


def _paint(text: str, *codes: str) -> str:
    if not COLORS_ENABLED:
        return text
    return ''.join(codes) + text + RESET


def info(text: str) -> str:
    return _paint(text, CYAN)


def dim(text: str) -> str:
    return _paint(text, DIM)


def bold(text: str) -> str:
    return _paint(text, BOLD)


def print_success(message: str) -> None:
    print(f"{_paint(CHECK, GREEN)} {message}")


def print_error(message: str) -> None:
    """Errors go to stderr so piped candidates on stdout stay clean."""
    print(_paint(f"{CROSS} {message}", RED), file=sys.stderr)


COMMIT_TYPE_COLORS = {
    'feat': GREEN,
    'fix': RED,
    'revert': RED,
    'perf': GREEN,
    'refactor': YELLOW,
    'test': MAGENTA,
    'docs': CYAN,
    'build': CYAN,
    'ci': CYAN,
    'chore': DIM,
    'style': DIM,
}

TYPE_PREFIX = re.compile(r'^(\w+)(\([^)]*\))?!?:')


def colorize_commit_type(message: str) -> str:
    """Color the conventional type prefix of a one-line commit message."""
    match = TYPE_PREFIX.match(message)
    color = match and COMMIT_TYPE_COLORS.get(match.group(1))
    if not color:
        return message
    prefix = match.group(0)
    return _paint(prefix, BOLD, color) + message[len(prefix):]


class Spinner:
    """Labelled spinner shown while the completion request is in flight. Use as context manager."""
    FRAMES = '⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏' if UNICODE_ENABLED else '-\\|/'

    def __init__(self, label: str = ""):
        self.label = label
        self._thread = None
        self._done = threading.Event()

    def _spin(self):
        tick = 0
        while not self._done.is_set():
            frame = self.FRAMES[tick % len(self.FRAMES)]
            print(f'\r\033[K{info(frame)} {self.label}', end='', flush=True)
            tick += 1
            self._done.wait(0.08)

    def __enter__(self):
        # Nothing to animate when stdout is piped
        if sys.stdout.isatty():
            self._done.clear()
            self._thread = threading.Thread(target=self._spin, daemon=True)
            self._thread.start()
        return self

    def __exit__(self, *args):
        self._done.set()
        if self._thread:
            self._thread.join()
            print('\r\033[K', end='', flush=True)


__all__ = [
    "COLORS_ENABLED", "UNICODE_ENABLED", "CHECK", "CROSS",
    "info", "dim", "bold",
    "print_success", "print_error",
    "COMMIT_TYPE_COLORS", "colorize_commit_type", "Spinner",
]
