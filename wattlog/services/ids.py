"""
Identifier generation for usage entries, rooms and devices.

IDs are a base-36 millisecond timestamp followed by a base-36 random
suffix. Unique within the practical operating window of the app;
collisions are not detected.

CHANGELOG:
- 2026-10-12: Initial creation (STORY-003)

TODO:
- None
"""

import secrets
import time

_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_base36(value: int) -> str:
    """Encode a non-negative integer in lowercase base 36."""
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_ALPHABET[rem])
    return "".join(reversed(digits))


def generate_id() -> str:
    """Return a new opaque identifier."""
    millis = time.time_ns() // 1_000_000
    return _to_base36(millis) + _to_base36(secrets.randbits(52))
