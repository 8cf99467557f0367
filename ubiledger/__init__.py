"""
ubiledger - Daily income ledger with demurrage

A fungible token that pays every account one coin per day of universal
basic income, continuously decays balances (demurrage), and lets an
account redirect percentages of its future income to other accounts.

Usage:
    from ubiledger import Token, SignerSet, FixedClock, Asset

    auth = SignerSet({"dailycoin", "alice", "bob"})
    clock = FixedClock(19000)
    token = Token(clock=clock, authority=auth)

    with auth.signed("dailycoin"):
        token.create("dailycoin", Asset.parse("1000000000.0000 XDL"))

    with auth.signed("alice"):
        token.claim("alice")
        token.setshare("alice", "bob", 25)

    clock.advance(10)
    with auth.signed("alice"):
        result = token.claim("alice")   # 10 days of income, 25% to bob
"""

# Core types
from .core import (
    Symbol,
    Asset,
    AccountBalance,
    CurrencyStats,
    Share,
    Profile,
    Notification,
    ActionRecord,
    LedgerError,
    ValidationError,
    NotFoundError,
    NoBalanceRecord,
    AuthorizationError,
    OverdrawnError,
    NothingDueError,
    NoCoinsAvailableError,
    COIN_SYMBOL,
    SYMBOL_PRECISION,
    PRECISION_MULTIPLIER,
    MAX_ASSET_AMOUNT,
    MAX_PAST_CLAIM_DAYS,
    LAST_SIGNUP_REWARD_DAY,
    SECONDS_PER_DAY,
    NOTIFY_BURN,
    NOTIFY_INCOME,
    NOTIFY_SHARE_INCOME,
)

# Configuration
from .policy import UbiPolicy, DEFAULT_POLICY

# Calendar
from .clock import Clock, SystemClock, FixedClock, day_from_timestamp, days_to_string

# Demurrage
from .decay import (
    DECAY_SCALE, apply_decay, decay_factor, daily_retention_factor, integer_root, retained_fraction,
)

# Collaborators
from .store import Table, LedgerStore, InMemoryStore
from .authority import Authority, SignerSet
from .events import EventSink, EventLog

# Engine
from .settlement import (
    SettlementResult,
    SharePortion,
    settle,
    distribute,
    split_income,
    income_memo,
    credit,
    debit,
)

# Token
from .token import Token, DEFAULT_CONTRACT_ACCOUNT


__all__ = [
    # Core
    'Symbol', 'Asset', 'AccountBalance', 'CurrencyStats', 'Share', 'Profile',
    'Notification', 'ActionRecord',
    'LedgerError', 'ValidationError', 'NotFoundError', 'NoBalanceRecord',
    'AuthorizationError', 'OverdrawnError', 'NothingDueError', 'NoCoinsAvailableError',
    'COIN_SYMBOL', 'SYMBOL_PRECISION', 'PRECISION_MULTIPLIER', 'MAX_ASSET_AMOUNT',
    'MAX_PAST_CLAIM_DAYS', 'LAST_SIGNUP_REWARD_DAY', 'SECONDS_PER_DAY',
    'NOTIFY_BURN', 'NOTIFY_INCOME', 'NOTIFY_SHARE_INCOME',
    # Configuration
    'UbiPolicy', 'DEFAULT_POLICY',
    # Calendar
    'Clock', 'SystemClock', 'FixedClock', 'day_from_timestamp', 'days_to_string',
    # Demurrage
    'DECAY_SCALE', 'apply_decay', 'decay_factor', 'daily_retention_factor', 'integer_root',
    'retained_fraction',
    # Collaborators
    'Table', 'LedgerStore', 'InMemoryStore', 'Authority', 'SignerSet',
    'EventSink', 'EventLog',
    # Engine
    'SettlementResult', 'SharePortion', 'settle', 'distribute', 'split_income',
    'income_memo', 'credit', 'debit',
    # Token
    'Token', 'DEFAULT_CONTRACT_ACCOUNT',
]

__version__ = '1.0.0'
