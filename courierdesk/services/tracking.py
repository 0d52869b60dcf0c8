"""
Tracking number generation.
Produces short, practically-unique identifiers; uniqueness itself is enforced
by the unique index on packages.tracking_number.
"""

import secrets
import string
import time
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from courierdesk.config import get_settings
from courierdesk.models import Package

BASE36_ALPHABET = string.digits + string.ascii_uppercase


def to_base36(number: int) -> str:
    """Encode a non-negative integer in upper-case base 36."""
    if number < 0:
        raise ValueError("number must be non-negative")
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(BASE36_ALPHABET[remainder])
    return "".join(reversed(digits))


def normalize_tracking_number(value: str) -> str:
    """Canonical form of a tracking number: trimmed and upper-cased."""
    return value.strip().upper()


def _random_segment(length: int) -> str:
    return "".join(secrets.choice(BASE36_ALPHABET) for _ in range(length))


def generate_tracking_number(
    prefix: Optional[str] = None,
    short: bool = False,
    now_ms: Optional[int] = None,
) -> str:
    """
    Generate a candidate tracking number.
    
    Long format:  PREFIX-<base36 epoch millis>-<random>, e.g. TAS-M1X2Y3Z4-4QF7
    Short format: PREFIX-<random>, e.g. TAS-7K2P9Q
    
    Args:
        prefix: Carrier prefix (defaults to the configured tracking_prefix)
        short: Use the short format
        now_ms: Timestamp override in epoch milliseconds
    
    Returns:
        Upper-case tracking number string
    """
    settings = get_settings()
    prefix = (prefix or settings.tracking_prefix).strip().upper()
    
    if short:
        return f"{prefix}-{_random_segment(settings.tracking_short_length)}"
    
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    timestamp = to_base36(now_ms)
    return f"{prefix}-{timestamp}-{_random_segment(settings.tracking_random_length)}"


async def is_tracking_number_available(db: AsyncSession, tracking_number: str) -> bool:
    """
    Check whether any package already uses a tracking number.
    
    Comparison ignores case and surrounding whitespace. This is a fast-fail
    hint for callers; the unique index decides.
    """
    result = await db.execute(
        select(Package.id)
        .where(func.upper(Package.tracking_number) == normalize_tracking_number(tracking_number))
        .limit(1)
    )
    return result.scalar_one_or_none() is None
