"""Time-ordered UUID (version 7) generation for primary keys."""

import os
import time
import uuid


def uuid7() -> uuid.UUID:
    """48-bit unix milliseconds, then version and variant bits, rest random."""
    unix_ms = time.time_ns() // 1_000_000
    rand = int.from_bytes(os.urandom(10), "big")

    value = (unix_ms & ((1 << 48) - 1)) << 80
    value |= 0x7 << 76
    value |= ((rand >> 62) & 0xFFF) << 64
    value |= 0b10 << 62
    value |= rand & ((1 << 62) - 1)
    return uuid.UUID(int=value)


def new_id() -> str:
    return str(uuid7())
