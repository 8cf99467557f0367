"""
decay.py - Integer-only demurrage

A balance held for `d` days keeps retention ** (d / period) of its value.
To make every implementation burn exactly the same amount, no floating
point is used anywhere:

1. `d` is split into whole decay periods and leftover days.
2. Whole periods are applied exactly, as retention ** periods in rationals.
3. The per-day retention factor is the floored integer `period`-th root of
   retention * SCALE ** period, found by integer Newton iteration. The
   leftover days raise it by binary exponentiation, flooring (// SCALE)
   after every multiplication.
4. The decayed balance is floored once, at the end.

Each step is fully specified integer arithmetic, so results are
bit-for-bit reproducible. A balance held for a whole number of periods
decays exactly as the rational formula says.
"""

from __future__ import annotations
from fractions import Fraction
from functools import lru_cache
from typing import Tuple

from .policy import UbiPolicy, DEFAULT_POLICY


# Fixed-point scale of decay factors. Large enough that the truncation of
# the per-day factor stays below one unit for any representable amount.
DECAY_SCALE = 10 ** 36


def integer_root(value: int, n: int) -> int:
    """
    Floor of the n-th root of a non-negative integer.

    Newton iteration started above the root decreases monotonically and
    stops at the floor.
    """
    if value < 0:
        raise ValueError(f"value must be non-negative, got {value}")
    if n < 1:
        raise ValueError(f"n must be positive, got {n}")
    if value < 2 or n == 1:
        return value
    x = 1 << -(-value.bit_length() // n)
    while True:
        y = ((n - 1) * x + value // x ** (n - 1)) // n
        if y >= x:
            return x
        x = y


@lru_cache(maxsize=32)
def daily_retention_factor(retention: Fraction, period_days: int) -> int:
    """Per-day retention scaled by DECAY_SCALE, floored."""
    retention = Fraction(retention)
    scaled = retention.numerator * DECAY_SCALE ** period_days // retention.denominator
    return integer_root(scaled, period_days)


def retained_fraction(days: int, policy: UbiPolicy = DEFAULT_POLICY) -> Tuple[int, int]:
    """
    Fraction of a balance kept after `days` days, as (numerator, denominator).

    Whole decay periods contribute the exact retention; only the leftover
    days go through the fixed-point per-day factor.
    """
    if days < 0:
        raise ValueError(f"days must be non-negative, got {days}")
    periods, rest = divmod(days, policy.decay_period_days)
    whole = policy.decay_retention ** periods

    base = daily_retention_factor(policy.decay_retention, policy.decay_period_days)
    partial = DECAY_SCALE
    while rest:
        if rest & 1:
            partial = partial * base // DECAY_SCALE
        rest >>= 1
        if rest:
            base = base * base // DECAY_SCALE
    return whole.numerator * partial, whole.denominator * DECAY_SCALE


def decay_factor(days: int, policy: UbiPolicy = DEFAULT_POLICY) -> int:
    """
    Fraction of a balance kept after `days` days, scaled by DECAY_SCALE.

    Returns exactly DECAY_SCALE for zero days.
    """
    numerator, denominator = retained_fraction(days, policy)
    return numerator * DECAY_SCALE // denominator


def apply_decay(amount: int, days: int, policy: UbiPolicy = DEFAULT_POLICY) -> Tuple[int, int]:
    """
    Decay a non-negative amount of smallest units over `days` days.

    Returns:
        (new_amount, burned) with new_amount + burned == amount.
    """
    if amount < 0:
        raise ValueError(f"amount must be non-negative, got {amount}")
    numerator, denominator = retained_fraction(days, policy)
    new_amount = amount * numerator // denominator
    return new_amount, amount - new_amount
