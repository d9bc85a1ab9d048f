from __future__ import annotations
import random
import string
import time

_ALPHABET = string.digits + string.ascii_lowercase
_SUFFIX_LEN = 9
_rng = random.SystemRandom()


def generate_id(prefix: str = "id") -> str:
    """Return ``<prefix>-<epoch ms>-<9 base-36 chars>``.

    Unique enough for a single interactive user; not a security token.
    """
    suffix = "".join(_rng.choice(_ALPHABET) for _ in range(_SUFFIX_LEN))
    return f"{prefix}-{int(time.time() * 1000)}-{suffix}"
