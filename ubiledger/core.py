"""
Core types and pure helpers for the UBI ledger.

This module provides the foundational data structures of the ledger:
1. Constants: fixed-point scale, claim limits, size limits
2. Immutable value types: Symbol, Asset
3. Immutable records: AccountBalance, CurrencyStats, Share, Profile
4. Notifications and action records for the audit trail
5. Exceptions: LedgerError and the domain-specific error types

Money is never a float. An Asset is an integer count of the smallest
units of its symbol (10**precision units per whole coin), and all
arithmetic on it is checked against MAX_ASSET_AMOUNT.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional, Tuple
import re


# ============================================================================
# CONSTANTS
# ============================================================================

# The token is hard-coded to a precision of 4 decimal digits.
SYMBOL_PRECISION = 4
PRECISION_MULTIPLIER = 10 ** SYMBOL_PRECISION

# Largest representable amount (same bound as a 62-bit signed quantity).
MAX_ASSET_AMOUNT = (1 << 62) - 1

# Longest symbol code and highest supported precision.
MAX_SYMBOL_CODE_LENGTH = 7
MAX_SYMBOL_PRECISION = 18

# Accumulated past income is capped; days beyond the cap are lost.
MAX_PAST_CLAIM_DAYS = 360

# Accounts opened on or before this day receive a signup bonus (2021-01-01).
LAST_SIGNUP_REWARD_DAY = 18628

SECONDS_PER_DAY = 86400

MAX_MEMO_BYTES = 256
MAX_PROFILE_BYTES = 1024

# Notification kinds
NOTIFY_BURN = "burn"
NOTIFY_INCOME = "income"
NOTIFY_SHARE_INCOME = "shareincome"

_SYMBOL_CODE_RE = re.compile(r"^[A-Z]{1,%d}$" % MAX_SYMBOL_CODE_LENGTH)


# ============================================================================
# EXCEPTIONS
# ============================================================================

class LedgerError(Exception):
    """Base exception for all ledger-related errors."""
    pass


class ValidationError(LedgerError):
    """Raised for malformed currency, amount, percentage or memo inputs."""
    pass


class NotFoundError(LedgerError):
    """Raised when a balance, stats or share record is required but missing."""
    pass


class NoBalanceRecord(NotFoundError):
    """Raised when settling an account that has no balance record for the currency."""
    pass


class AuthorizationError(LedgerError):
    """Raised when an actor lacks the authority an action requires."""
    pass


class OverdrawnError(LedgerError):
    """Raised when a debit exceeds the stored balance."""
    pass


class NothingDueError(LedgerError):
    """Raised when a settlement was demanded but the account is already settled through today."""
    pass


class NoCoinsAvailableError(LedgerError):
    """Raised when a settlement was demanded but the max supply leaves nothing to pay."""
    pass


# ============================================================================
# SYMBOL AND ASSET
# ============================================================================

@dataclass(frozen=True, slots=True)
class Symbol:
    """
    Currency symbol: an upper-case code plus its fixed decimal precision.

    Attributes:
        code: 1 to 7 upper-case letters (e.g., "XDL").
        precision: Number of decimal digits of the smallest unit.
    """
    code: str
    precision: int = SYMBOL_PRECISION

    def __post_init__(self):
        if not isinstance(self.code, str) or not _SYMBOL_CODE_RE.fullmatch(self.code):
            raise ValidationError(f"invalid symbol name: {self.code!r}")
        if isinstance(self.precision, bool) or not isinstance(self.precision, int):
            raise ValidationError(f"invalid symbol precision: {self.precision!r}")
        if not 0 <= self.precision <= MAX_SYMBOL_PRECISION:
            raise ValidationError(f"invalid symbol precision: {self.precision}")

    @classmethod
    def parse(cls, text: str) -> Symbol:
        """Parse the "precision,CODE" form, e.g. "4,XDL"."""
        try:
            precision, code = text.split(",")
            return cls(code.strip(), int(precision))
        except ValueError:
            raise ValidationError(f"invalid symbol: {text!r}") from None

    @property
    def multiplier(self) -> int:
        """Smallest units per whole coin."""
        return 10 ** self.precision

    def __str__(self) -> str:
        return f"{self.precision},{self.code}"


@dataclass(frozen=True, slots=True)
class Asset:
    """
    A fixed-point amount tagged with its currency symbol.

    Attributes:
        amount: Signed integer count of smallest units.
        symbol: Currency symbol the amount is denominated in.

    Addition and subtraction require matching symbols and raise
    ValidationError on overflow past MAX_ASSET_AMOUNT.
    """
    amount: int
    symbol: Symbol

    def __post_init__(self):
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise ValidationError(f"asset amount must be an integer, got {type(self.amount).__name__}")
        if not isinstance(self.symbol, Symbol):
            raise ValidationError(f"asset symbol must be a Symbol, got {type(self.symbol).__name__}")

    @classmethod
    def zero(cls, symbol: Symbol) -> Asset:
        return cls(0, symbol)

    @classmethod
    def parse(cls, text: str) -> Asset:
        """
        Parse "1.0000 XDL" into an Asset.

        The number of fractional digits written determines the precision.
        """
        try:
            number, code = text.strip().split(" ")
            value = Decimal(number)
        except (ValueError, InvalidOperation):
            raise ValidationError(f"invalid asset: {text!r}") from None
        if not value.is_finite():
            raise ValidationError(f"invalid asset: {text!r}")
        precision = len(number.split(".")[1]) if "." in number else 0
        symbol = Symbol(code, precision)
        return cls(int(value.scaleb(precision)), symbol)

    def is_valid(self) -> bool:
        """True if the amount is within the representable range."""
        return -MAX_ASSET_AMOUNT <= self.amount <= MAX_ASSET_AMOUNT

    def with_amount(self, amount: int) -> Asset:
        return Asset(amount, self.symbol)

    def to_decimal(self) -> Decimal:
        return Decimal(self.amount).scaleb(-self.symbol.precision)

    def _check_symbol(self, other: Asset, verb: str) -> None:
        if not isinstance(other, Asset):
            raise TypeError(f"cannot {verb} Asset and {type(other).__name__}")
        if other.symbol != self.symbol:
            raise ValidationError(f"attempt to {verb} asset with different symbol")

    def __add__(self, other: Asset) -> Asset:
        self._check_symbol(other, "add")
        amount = self.amount + other.amount
        if amount < -MAX_ASSET_AMOUNT:
            raise ValidationError("addition underflow")
        if amount > MAX_ASSET_AMOUNT:
            raise ValidationError("addition overflow")
        return Asset(amount, self.symbol)

    def __sub__(self, other: Asset) -> Asset:
        self._check_symbol(other, "subtract")
        amount = self.amount - other.amount
        if amount < -MAX_ASSET_AMOUNT:
            raise ValidationError("subtraction underflow")
        if amount > MAX_ASSET_AMOUNT:
            raise ValidationError("subtraction overflow")
        return Asset(amount, self.symbol)

    def __neg__(self) -> Asset:
        return Asset(-self.amount, self.symbol)

    def __lt__(self, other: Asset) -> bool:
        self._check_symbol(other, "compare")
        return self.amount < other.amount

    def __le__(self, other: Asset) -> bool:
        self._check_symbol(other, "compare")
        return self.amount <= other.amount

    def __gt__(self, other: Asset) -> bool:
        self._check_symbol(other, "compare")
        return self.amount > other.amount

    def __ge__(self, other: Asset) -> bool:
        self._check_symbol(other, "compare")
        return self.amount >= other.amount

    def __str__(self) -> str:
        precision = self.symbol.precision
        sign = "-" if self.amount < 0 else ""
        whole, frac = divmod(abs(self.amount), 10 ** precision)
        if precision == 0:
            return f"{sign}{whole} {self.symbol.code}"
        return f"{sign}{whole}.{frac:0{precision}d} {self.symbol.code}"

    def __repr__(self) -> str:
        return f"Asset({self})"


# Reference coin of the ledger.
COIN_SYMBOL = Symbol("XDL", SYMBOL_PRECISION)


# ============================================================================
# RECORDS
# ============================================================================

@dataclass(frozen=True, slots=True)
class AccountBalance:
    """
    Per (owner, currency) balance row.

    Attributes:
        balance: Current balance; never negative at action boundaries.
        last_settlement_day: Day through which decay and income have been
            settled. 0 means the account has never been settled.
    """
    balance: Asset
    last_settlement_day: int = 0


@dataclass(frozen=True, slots=True)
class CurrencyStats:
    """
    Per-currency statistics row.

    Attributes:
        supply: Outstanding amount (0 <= supply <= max_supply).
        max_supply: Ceiling fixed at creation.
        issuer: Account holding mint authority.
        burned: Lifetime amount destroyed by demurrage, retire and burn.
        claims: Lifetime count of successful income settlements.
    """
    supply: Asset
    max_supply: Asset
    issuer: str
    burned: Asset
    claims: int = 0

    @property
    def symbol(self) -> Symbol:
        return self.max_supply.symbol

    @property
    def available(self) -> Asset:
        """Amount that can still be issued or paid as income."""
        return self.max_supply - self.supply


@dataclass(frozen=True, slots=True)
class Share:
    """Standing redirection of `percent` of the owner's income to `beneficiary`."""
    owner: str
    beneficiary: str
    percent: int


@dataclass(frozen=True, slots=True)
class Profile:
    """Free-form profile text published by an account."""
    owner: str
    text: str


# ============================================================================
# NOTIFICATIONS AND AUDIT TRAIL
# ============================================================================

@dataclass(frozen=True, slots=True)
class Notification:
    """
    Fire-and-forget notification emitted by an action.

    Attributes:
        kind: One of "burn", "income", "shareincome".
        params: Payload as frozen tuple of (key, value) pairs.
    """
    kind: str
    params: Tuple[Tuple[str, Any], ...] = ()

    @classmethod
    def of(cls, kind: str, **params: Any) -> Notification:
        return cls(kind, tuple(params.items()))

    @property
    def params_dict(self) -> Dict[str, Any]:
        """Get params as a dictionary for convenience."""
        return dict(self.params)

    def __repr__(self) -> str:
        body = ", ".join(f"{k}={v}" for k, v in self.params)
        return f"Notification({self.kind}: {body})"


@dataclass(frozen=True, slots=True)
class ActionRecord:
    """
    Executed action, as kept in Token.action_log.

    Attributes:
        sequence_number: Monotonic position in the log.
        action: Action name (e.g., "transfer", "claim").
        day: Day counter at execution.
        notifications: Notifications the action emitted, in order.
        result: Optional value returned by the action (e.g., a SettlementResult).
    """
    sequence_number: int
    action: str
    day: int
    notifications: Tuple[Notification, ...] = ()
    result: Optional[Any] = field(default=None, compare=False)


# ============================================================================
# VALIDATION HELPERS
# ============================================================================

def check_memo(memo: str, limit: int = MAX_MEMO_BYTES, what: str = "memo") -> None:
    """Reject text longer than `limit` bytes once UTF-8 encoded."""
    if len(memo.encode("utf-8")) > limit:
        raise ValidationError(f"{what} has more than {limit} bytes")


def check_quantity(quantity: Asset, verb: str) -> None:
    """Reject out-of-range or non-positive quantities."""
    if not quantity.is_valid():
        raise ValidationError("invalid quantity")
    if quantity.amount <= 0:
        raise ValidationError(f"must {verb} positive quantity")
