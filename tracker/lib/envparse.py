"""
Reader for tracker.env settings files.

One KEY=value setting per line. Blank lines and lines starting with '#'
are skipped, and ' #' in an unquoted value starts a trailing comment.
Values may be wrapped in matching single or double quotes.

Nothing is expanded or executed, so values that look like shell
substitutions are rejected instead of being taken literally.
"""

import re
from pathlib import Path
from typing import Iterable, Optional

KEY_PATTERN = re.compile(r'^[A-Z][A-Z0-9_]*$')
SHELL_SYNTAX = re.compile(r'`|\$[({A-Za-z_]')
TRAILING_COMMENT = re.compile(r'\s+#.*$')


def _unquote(value: str, lineno: int) -> str:
    if value[:1] not in ('"', "'"):
        return TRAILING_COMMENT.sub('', value)

    quote = value[0]
    end = value.find(quote, 1)
    if end == -1:
        raise ValueError(f"Line {lineno}: Unterminated {quote} quote")
    rest = value[end + 1:].strip()
    if rest and not rest.startswith('#'):
        raise ValueError(f"Line {lineno}: Unexpected text after closing quote: {rest}")
    return value[1:end]


def parse_env(text: str, known_keys: Optional[Iterable[str]] = None) -> dict:
    """
    Parse settings text into a dict.

    When known_keys is given, any other key is an error, so a misspelled
    setting is reported instead of silently ignored.

    Raises:
        ValueError: on bad syntax, unknown or repeated keys, or shell syntax
    """
    allowed = set(known_keys) if known_keys is not None else None
    settings = {}
    first_seen = {}

    for lineno, line in enumerate(text.splitlines(), 1):
        line = line.strip()
        if not line or line.startswith('#'):
            continue

        key, sep, value = line.partition('=')
        key = key.strip()
        if not sep:
            raise ValueError(f"Line {lineno}: Expected KEY=value, got '{line}'")
        if not KEY_PATTERN.match(key):
            raise ValueError(f"Line {lineno}: Invalid key '{key}'")
        if allowed is not None and key not in allowed:
            raise ValueError(
                f"Line {lineno}: Unknown setting '{key}' "
                f"(expected one of {', '.join(sorted(allowed))})"
            )
        if key in first_seen:
            raise ValueError(f"Line {lineno}: {key} already set on line {first_seen[key]}")

        value = _unquote(value.strip(), lineno)
        if SHELL_SYNTAX.search(value):
            raise ValueError(f"Line {lineno}: {key} uses shell syntax, which is not expanded")

        settings[key] = value
        first_seen[key] = lineno

    return settings


def load_env(filepath: str, known_keys: Optional[Iterable[str]] = None) -> dict:
    """
    Read and parse a settings file.

    Raises:
        FileNotFoundError: if file doesn't exist
        ValueError: see parse_env
    """
    path = Path(filepath)

    if not path.exists():
        raise FileNotFoundError(f"Env file not found: {filepath}")

    return parse_env(path.read_text(encoding="utf-8"), known_keys)
