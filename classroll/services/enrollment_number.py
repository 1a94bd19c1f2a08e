"""Human-readable enrollment codes, e.g. ``25.2.4817``."""

import random
import re
from datetime import datetime
from typing import Optional

ENROLLMENT_NUMBER_PATTERN = re.compile(r"^\d{2}\.[12]\.\d{4}$")


def semester_of(month: int) -> int:
    """First half of the year is semester 1, second half semester 2."""
    return 1 if month <= 6 else 2


def generate_enrollment_number(now: Optional[datetime] = None) -> str:
    """Build ``YY.S.RRRR`` from the (local) date and a random 4-digit suffix.

    Only 9000 suffixes exist per half-year, so collisions are possible; the
    unique index on ``enrollments.enrollment`` rejects them and the caller
    decides whether to try again.
    """
    now = now or datetime.now()
    year = now.year % 100
    suffix = random.randint(1000, 9999)
    return f"{year:02d}.{semester_of(now.month)}.{suffix}"
