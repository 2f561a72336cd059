"""Locally-unique opaque identifiers for sessions and messages.

An identifier is the current time in milliseconds followed by a random
component, both in base 36. Uniqueness holds in practice within one local
store; nothing here is meant to be unguessable.
"""

import random
import string
import time

_ALPHABET = string.digits + string.ascii_lowercase

# Same order of magnitude as the fractional digits of a double.
_RANDOM_BITS = 52


def to_base36(value: int) -> str:
    if value < 0:
        raise ValueError("value must be non-negative")
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_ALPHABET[rem])
    return "".join(reversed(digits))


def generate_id() -> str:
    millis = time.time_ns() // 1_000_000
    return to_base36(millis) + to_base36(random.getrandbits(_RANDOM_BITS))
