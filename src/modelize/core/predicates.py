"""Shape and format predicates for field validity checks.

Every predicate returns a bool for any input and never raises.
"""

from __future__ import annotations

import math
import re
from typing import Any

_EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._-]+@[a-zA-Z0-9-]+\.[a-zA-Z]+")
_URL_PATTERN = re.compile(r"^https?://[a-zA-Z0-9\-_.?=&]")


def is_number(value: Any) -> bool:
    """Finite int or float. bool is excluded even though it subclasses int."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value)


def is_integer(value: Any) -> bool:
    """Integral number; 42.0 counts, as it does on the JSON wire."""
    if isinstance(value, bool):
        return False
    return isinstance(value, int) or (isinstance(value, float) and value.is_integer())


def is_email(value: Any) -> bool:
    return isinstance(value, str) and _EMAIL_PATTERN.search(value) is not None


def is_url(value: Any) -> bool:
    return isinstance(value, str) and _URL_PATTERN.search(value) is not None


def is_base64(value: Any) -> bool:
    """Data URI carrying base64 content, e.g. 'data:image/png;base64,...'."""
    return isinstance(value, str) and "data:" in value and ";base64" in value


def is_file(value: Any) -> bool:
    """A file reference is either a remote URL or an inline base64 data URI."""
    return is_url(value) or is_base64(value)


def is_ip(value: Any) -> bool:
    """Dotted-quad IPv4 address, each block an integer in 0..255."""
    if not isinstance(value, str):
        return False
    blocks = value.split(".")
    if len(blocks) != 4:
        return False
    return all(block.isascii() and block.isdigit() and 0 <= int(block) <= 255 for block in blocks)
