"""
policy.py - Tunable parameters of the income and demurrage engine

All configuration is a plain immutable object passed explicitly to the
engine. DEFAULT_POLICY carries the reference values.
"""

from __future__ import annotations
from dataclasses import dataclass
from fractions import Fraction
from typing import Optional

from .core import (
    COIN_SYMBOL, LAST_SIGNUP_REWARD_DAY, MAX_PAST_CLAIM_DAYS, SYMBOL_PRECISION,
    Symbol,
)


@dataclass(frozen=True, slots=True)
class UbiPolicy:
    """
    Parameters of the decay-and-claim engine.

    Attributes:
        coin_symbol: Currency paid by claim() when no symbol is given.
        max_past_claim_days: Most past days of income that can be claimed at once.
        signup_bonus_until: Last day on which first-time claimants receive a
            bonus reaching back to this day. None disables the bonus window.
        max_signup_bonus_days: Cap on the bonus, in days.
        decay_retention: Fraction of a balance kept after one decay period.
        decay_period_days: Length of a decay period, in days.
        symbol_precision: The only precision create() accepts.
    """
    coin_symbol: Symbol = COIN_SYMBOL
    max_past_claim_days: int = MAX_PAST_CLAIM_DAYS
    signup_bonus_until: Optional[int] = LAST_SIGNUP_REWARD_DAY
    max_signup_bonus_days: int = MAX_PAST_CLAIM_DAYS
    decay_retention: Fraction = Fraction(999, 1000)
    decay_period_days: int = 365
    symbol_precision: int = SYMBOL_PRECISION

    def __post_init__(self):
        if self.max_past_claim_days < 0:
            raise ValueError(f"max_past_claim_days must be non-negative, got {self.max_past_claim_days}")
        if self.max_signup_bonus_days < 0:
            raise ValueError(f"max_signup_bonus_days must be non-negative, got {self.max_signup_bonus_days}")
        if self.signup_bonus_until is not None and self.signup_bonus_until < 0:
            raise ValueError(f"signup_bonus_until must be non-negative, got {self.signup_bonus_until}")
        retention = Fraction(self.decay_retention)
        if not 0 < retention <= 1:
            raise ValueError(f"decay_retention must be in (0, 1], got {self.decay_retention}")
        object.__setattr__(self, 'decay_retention', retention)
        if self.decay_period_days < 1:
            raise ValueError(f"decay_period_days must be positive, got {self.decay_period_days}")
        if self.coin_symbol.precision != self.symbol_precision:
            raise ValueError(
                f"coin_symbol precision {self.coin_symbol.precision} "
                f"does not match symbol_precision {self.symbol_precision}"
            )

    def units_per_day(self, symbol: Symbol) -> int:
        """Income paid per day: one whole coin."""
        return symbol.multiplier

    def signup_bonus_days(self, today: int) -> int:
        """Extra days of income granted to a first-time claimant on `today`."""
        if self.signup_bonus_until is None or today > self.signup_bonus_until:
            return 0
        return min(self.signup_bonus_until - today + 1, self.max_signup_bonus_days)


DEFAULT_POLICY = UbiPolicy()
