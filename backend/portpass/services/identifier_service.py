# Overview: Service-layer operations for pass numbers; generation plus uniqueness checks against the store.

"""
Pass number generation.

Format: PP-<year>-<last 6 digits of the ms timestamp><2 random digits>,
e.g. PP-2025-48213907.

The raw generator is not collision free (two calls within the same
millisecond share the timestamp part), so mint_pass_number() checks every
candidate against the store and against numbers already reserved by the
current batch before handing it out. The passes table also carries a unique
constraint on pass_number.
"""

from __future__ import annotations

import random
import re
import time
from datetime import datetime
from typing import Callable, Collection

from ..errors import StorageFailure
from ..store import PassStore


PASS_NUMBER_PREFIX = "PP"
PASS_NUMBER_PATTERN = re.compile(r"^PP-\d{4}-\d{8}$")
MINT_ATTEMPTS = 5


def next_pass_number(
    now: datetime | None = None,
    rng: random.Random | None = None,
    clock_ms: Callable[[], int] | None = None,
) -> str:
    """Produce a fresh pass number. Not idempotent."""
    year = (now or datetime.now()).year
    millis = clock_ms() if clock_ms else time.time_ns() // 1_000_000
    suffix = (rng or random).randrange(100)
    return f"{PASS_NUMBER_PREFIX}-{year}-{millis % 1_000_000:06d}{suffix:02d}"


def is_pass_number(value: str) -> bool:
    return bool(PASS_NUMBER_PATTERN.match(value or ""))


def mint_pass_number(
    store: PassStore,
    reserved: Collection[str] = (),
    attempts: int = MINT_ATTEMPTS,
    generator: Callable[[], str] = next_pass_number,
) -> str:
    """
    Generate a pass number that is not yet used.

    Raises StorageFailure when every attempt collides.
    """
    for _ in range(attempts):
        candidate = generator()
        if candidate in reserved:
            continue
        if not store.pass_number_exists(candidate):
            return candidate
    raise StorageFailure("Could not allocate a unique pass number")
