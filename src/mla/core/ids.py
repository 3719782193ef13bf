"""Readable identifier generation."""

from __future__ import annotations

import random
import string
import time

BASE36_ALPHABET = string.digits + string.ascii_lowercase
SUFFIX_LENGTH = 6


def to_base36(value: int) -> str:
    """Encode a non-negative integer in base 36 (lowercase)."""
    if value < 0:
        raise ValueError(f"Cannot encode negative value: {value}")
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(BASE36_ALPHABET[remainder])
    return "".join(reversed(digits))


def create_id(prefix: str) -> str:
    """Generate an id like ``arc-lq3k9x2a-4f8z1c``.

    The middle part is the current time in milliseconds, the tail is random.
    Unique enough to compare within one tree; not a security token.
    """
    stamp = to_base36(int(time.time() * 1000))
    suffix = "".join(random.choices(BASE36_ALPHABET, k=SUFFIX_LENGTH))
    return f"{prefix}-{stamp}-{suffix}"
