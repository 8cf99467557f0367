"""
settlement.py - Decay-and-claim engine

This module settles an account up to today in one logical step:
1. Demurrage: burn the decay of the current balance since the last settlement
2. Income: pay one coin per elapsed day (capped at max_past_claim_days,
   the excess is lost) plus one for today, clamped to the max supply
3. Distribution: split the income across the owner's shares, the
   un-shared residue going to the owner

Also provides the two balance mutation primitives, debit() and credit(),
which are the only other ways a balance changes.

The engine never rolls back the decay once applied: an income that cannot
be paid is lost, not deferred. When the caller demands a result
(fail_if_nothing_due=True), NothingDueError and NoCoinsAvailableError
abort the enclosing transaction instead.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Sequence, Tuple

from .clock import days_to_string
from .core import (
    AccountBalance, Asset, CurrencyStats, Notification, Share, Symbol,
    NOTIFY_BURN, NOTIFY_INCOME, NOTIFY_SHARE_INCOME,
    NoBalanceRecord, NoCoinsAvailableError, NothingDueError, OverdrawnError,
    ValidationError,
)
from .decay import apply_decay
from .policy import UbiPolicy, DEFAULT_POLICY
from .store import LedgerStore


Emit = Callable[[Notification], None]


def _discard(notification: Notification) -> None:
    pass


# ============================================================================
# RESULT TYPES
# ============================================================================

@dataclass(frozen=True, slots=True)
class SharePortion:
    """Part of an income paid to a share beneficiary."""
    beneficiary: str
    percent: int
    quantity: Asset


@dataclass(frozen=True, slots=True)
class SettlementResult:
    """
    Outcome of settle().

    Attributes:
        owner: Settled account
        symbol: Currency settled
        today: Day of the settlement
        previous_day: Stored last settlement day before this call
        settled: False when nothing was due (previous_day >= today)
        decay_days: Days of demurrage applied
        burned: Demurrage burned from the balance
        effective_previous_day: Baseline day income was counted from
        pending_days: Past days paid (excluding today), after the cap
        lost_days: Past days forfeited beyond the cap
        claim_days: Days of income owed (pending_days + 1)
        claimed: Income actually paid after the max-supply clamp
        next_claim_day: Next day on which income is expected
        portions: Income paid to share beneficiaries, in payment order
        residue: Income paid to the owner itself
        stats: Currency statistics after the settlement
    """
    owner: str
    symbol: Symbol
    today: int
    previous_day: int
    settled: bool
    decay_days: int = 0
    burned: Optional[Asset] = None
    effective_previous_day: Optional[int] = None
    pending_days: int = 0
    lost_days: int = 0
    claim_days: int = 0
    claimed: Optional[Asset] = None
    next_claim_day: Optional[int] = None
    portions: Tuple[SharePortion, ...] = ()
    residue: Optional[Asset] = None
    stats: Optional[CurrencyStats] = None

    def __post_init__(self):
        zero = Asset.zero(self.symbol)
        for name in ('burned', 'claimed', 'residue'):
            if getattr(self, name) is None:
                object.__setattr__(self, name, zero)

    @property
    def paid(self) -> bool:
        """True if any income was paid."""
        return self.claimed.amount > 0

    @property
    def shared(self) -> Asset:
        """Total income paid to share beneficiaries."""
        total = Asset.zero(self.symbol)
        for portion in self.portions:
            total = total + portion.quantity
        return total


# ============================================================================
# BALANCE PRIMITIVES
# ============================================================================

def debit(store: LedgerStore, owner: str, quantity: Asset) -> AccountBalance:
    """
    Subtract `quantity` from the owner's balance.

    Raises:
        NoBalanceRecord: If the owner has no balance in this currency
        OverdrawnError: If the balance is smaller than `quantity`
    """
    key = (owner, quantity.symbol.code)
    record = store.accounts.find(key)
    if record is None:
        raise NoBalanceRecord(f"no balance object found for {owner}")
    if record.balance.amount < quantity.amount:
        raise OverdrawnError("overdrawn balance")
    return store.accounts.update(key, lambda r: replace(r, balance=r.balance - quantity))


def credit(store: LedgerStore, owner: str, quantity: Asset, payer: str) -> AccountBalance:
    """
    Add `quantity` to the owner's balance.

    A missing record is created (never settled) with its storage charged
    to `payer`.
    """
    key = (owner, quantity.symbol.code)
    if key not in store.accounts:
        return store.accounts.insert(key, AccountBalance(quantity, 0), payer)
    return store.accounts.update(key, lambda r: replace(r, balance=r.balance + quantity))


# ============================================================================
# DISTRIBUTION
# ============================================================================

def split_income(total: int, shares: Sequence[Share]) -> Tuple[List[Tuple[Share, int]], int]:
    """
    Split `total` smallest units across `shares`, in the order given.

    Each share receives floor(total * percent / 100), computed against the
    original total. The share that brings the running percentage to 100 or
    more absorbs everything that remains, truncation error included, and
    ends the split.

    Returns:
        (portions, residue): (share, amount) pairs actually paid, and the
        amount left for the owner. sum(portions) + residue == total.
    """
    remaining = total
    pcsum = 0
    portions: List[Tuple[Share, int]] = []
    for share in shares:
        pcsum += share.percent
        if pcsum >= 100:
            portion = remaining
        else:
            portion = total * share.percent // 100
        remaining -= portion
        portions.append((share, portion))
        if remaining <= 0:
            break
    return portions, remaining


def distribute(
    store: LedgerStore,
    owner: str,
    total: Asset,
    payer: str,
    emit: Emit = _discard,
) -> Tuple[Tuple[SharePortion, ...], Asset]:
    """
    Pay an income of `total` through the owner's shares.

    Shares are visited in ascending beneficiary order, so who absorbs the
    truncation error never depends on storage order. Every portion is
    credited (storage charged to `payer`) and announced with a
    "shareincome" notification; the residue is credited to the owner.

    Returns:
        (portions, residue)
    """
    shares = sorted(store.shares_of(owner), key=lambda s: s.beneficiary)
    split, remaining = split_income(total.amount, shares)

    portions = []
    for share, amount in split:
        quantity = total.with_amount(amount)
        emit(Notification.of(
            NOTIFY_SHARE_INCOME,
            owner=owner, to=share.beneficiary, quantity=quantity, percent=share.percent,
        ))
        credit(store, share.beneficiary, quantity, payer)
        portions.append(SharePortion(share.beneficiary, share.percent, quantity))

    residue = total.with_amount(max(remaining, 0))
    if residue.amount > 0:
        credit(store, owner, residue, payer)
    return tuple(portions), residue


# ============================================================================
# SETTLEMENT
# ============================================================================

def income_memo(next_claim_day: int, lost_days: int) -> str:
    """Memo of an income notification, e.g. "next on 02-01-2021"."""
    memo = f"next on {days_to_string(next_claim_day)}"
    if lost_days > 0:
        memo += f", lost {lost_days} days of income."
    return memo


def settle(
    store: LedgerStore,
    owner: str,
    symbol: Symbol,
    payer: str,
    today: int,
    policy: UbiPolicy = DEFAULT_POLICY,
    emit: Emit = _discard,
    fail_if_nothing_due: bool = False,
) -> SettlementResult:
    """
    Settle decay and income of `owner` in `symbol` through `today`.

    Args:
        store: Ledger store to read and mutate
        owner: Account to settle
        symbol: Currency to settle
        payer: Account charged for rows created by the distribution
        today: Current day counter
        policy: Engine parameters
        emit: Receives the notifications of the settlement
        fail_if_nothing_due: Raise instead of returning a no-op result

    Returns:
        SettlementResult describing what was burned and paid

    Raises:
        NoBalanceRecord: If the owner has no balance record in `symbol`
        NotFoundError: If the currency does not exist
        NothingDueError: Already settled today and fail_if_nothing_due
        NoCoinsAvailableError: Max supply reached and fail_if_nothing_due

    Example:
        result = settle(store, "alice", COIN_SYMBOL, "alice", clock.today())
        print(result.claimed, result.lost_days)
    """
    key = (owner, symbol.code)
    account = store.accounts.find(key)
    if account is None:
        raise NoBalanceRecord(f"no balance object found for {owner}")
    stats = store.stats.get(symbol.code, "symbol does not exist")
    if stats.symbol != symbol:
        raise ValidationError("symbol precision mismatch")

    previous_day = account.last_settlement_day
    if previous_day >= today:
        if fail_if_nothing_due:
            raise NothingDueError("no pending income to claim")
        return SettlementResult(owner, symbol, today, previous_day, settled=False, stats=stats)

    # Demurrage on the current balance, settled through today whatever follows.
    decay_days = today - previous_day if previous_day > 0 else 1
    _, burned_amount = apply_decay(account.balance.amount, decay_days, policy)
    burned = account.balance.with_amount(burned_amount)
    store.accounts.update(
        key, lambda r: replace(r, balance=r.balance - burned, last_settlement_day=today)
    )
    if burned_amount > 0:
        stats = store.stats.update(
            symbol.code, lambda s: replace(s, supply=s.supply - burned, burned=s.burned + burned)
        )
    emit(Notification.of(NOTIFY_BURN, owner=owner, quantity=burned, memo="demurrage"))

    # A never-settled account counts from yesterday, or earlier during the signup window.
    effective_previous_day = previous_day
    if previous_day == 0:
        effective_previous_day = today - 1 - policy.signup_bonus_days(today)

    pending_days = today - effective_previous_day - 1
    lost_days = 0
    if pending_days > policy.max_past_claim_days:
        lost_days = pending_days - policy.max_past_claim_days
        pending_days = policy.max_past_claim_days
    claim_days = pending_days + 1

    units_per_day = policy.units_per_day(symbol)
    claim_amount = min(claim_days * units_per_day, stats.available.amount)

    decay_only = dict(
        decay_days=decay_days, burned=burned,
        effective_previous_day=effective_previous_day,
        pending_days=pending_days, lost_days=lost_days, claim_days=claim_days,
    )
    if claim_amount <= 0:
        if fail_if_nothing_due:
            raise NoCoinsAvailableError("no coins")
        return SettlementResult(
            owner, symbol, today, previous_day, settled=True, stats=stats, **decay_only
        )

    claimed = stats.supply.with_amount(claim_amount)
    days_covered = lost_days + claim_amount // units_per_day
    next_claim_day = effective_previous_day + days_covered + 1
    emit(Notification.of(
        NOTIFY_INCOME,
        to=owner, quantity=claimed, memo=income_memo(next_claim_day, lost_days),
        next_claim_day=next_claim_day, lost_days=lost_days,
    ))

    stats = store.stats.update(
        symbol.code, lambda s: replace(s, supply=s.supply + claimed, claims=s.claims + 1)
    )

    portions, residue = distribute(store, owner, claimed, payer, emit)

    return SettlementResult(
        owner, symbol, today, previous_day, settled=True,
        claimed=claimed, next_claim_day=next_claim_day,
        portions=portions, residue=residue, stats=stats,
        **decay_only,
    )
