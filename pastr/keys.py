"""
Paste key generation.

Keys are slugs, not secrets. Both strategies rely on the store's
insert-if-absent check, with regeneration on conflict.
"""
import secrets
import string
import uuid
from typing import Callable, Dict

BASE36_ALPHABET = string.digits + string.ascii_lowercase


def uuid_key() -> str:
    """Random 128-bit key in canonical UUID form."""
    return str(uuid.uuid4())


def base36_key() -> str:
    """Random 32-bit key rendered in base 36 (at most 7 characters)."""
    value = secrets.randbits(32)
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(BASE36_ALPHABET[remainder])
    return "".join(reversed(digits))


STRATEGIES: Dict[str, Callable[[], str]] = {
    "uuid": uuid_key,
    "base36": base36_key,
}


def get_generator(strategy: str) -> Callable[[], str]:
    """Look up a key generator by name."""
    try:
        return STRATEGIES[strategy]
    except KeyError:
        raise ValueError(
            f"Unknown key strategy {strategy!r}; expected one of {sorted(STRATEGIES)}"
        ) from None
