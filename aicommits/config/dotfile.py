"""Reading and writing the flat `KEY=value` config file.

Parsing is python-dotenv's. Writing is a thin serializer that emits the
same syntax: values dotenv would not read back unchanged go out
double-quoted, and a key whose value is None is written bare.
"""

import json
import re
from pathlib import Path
from typing import Any, Optional

from dotenv import dotenv_values

NEEDS_QUOTES = re.compile(r'[=#"\'\r\n]|^\[')


def _format(value: Any) -> str:
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return str(value)


def _safe(value: str) -> str:
    if NEEDS_QUOTES.search(value) or value != value.strip():
        return json.dumps(value, ensure_ascii=False)
    return value


def load(path: Path) -> dict[str, Optional[str]]:
    """Key/value pairs in file order; a bare `KEY` line maps to None."""
    return dict(dotenv_values(path, interpolate=False))


def dumps(data: dict[str, Any]) -> str:
    lines = [
        key if value is None else f"{key}={_safe(_format(value))}"
        for key, value in data.items()
    ]
    return ''.join(f"{line}\n" for line in lines)
