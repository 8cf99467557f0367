"""
conftest.py - Shared pytest fixtures for ubiledger tests

Provides common fixtures used across unit, functional and conformance tests:
- Collaborators (signer set, fixed clock, event log)
- Tokens (empty, with the XDL currency created)
- Comparison utilities
"""

import pytest

from ubiledger import (
    Token, SignerSet, FixedClock, EventLog, InMemoryStore,
    Asset, UbiPolicy, COIN_SYMBOL, DEFAULT_CONTRACT_ACCOUNT,
)


# =============================================================================
# CONSTANTS
# =============================================================================

# 2022-01-08, well past the signup bonus window of the default policy.
START_DAY = 19000

ACCOUNTS = {DEFAULT_CONTRACT_ACCOUNT, "issuer", "alice", "bob", "charlie", "dave", "eve"}

MAX_SUPPLY = Asset.parse("1000000000.0000 XDL")


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def ledger_is_conserved(token: Token, symbol_code: str = "XDL") -> bool:
    """Supply equals the sum of all balances and stays within bounds."""
    stats = token.get_stats(symbol_code)
    total = token.store.total_balance(symbol_code)
    return total == stats.supply.amount and 0 <= stats.supply.amount <= stats.max_supply.amount


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def auth():
    return SignerSet(ACCOUNTS)


@pytest.fixture
def clock():
    return FixedClock(START_DAY)


@pytest.fixture
def events():
    return EventLog()


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def no_bonus_policy():
    """Reference policy with the signup bonus window disabled."""
    return UbiPolicy(signup_bonus_until=None)


@pytest.fixture
def token(store, clock, auth, events):
    """Token with no currency created yet."""
    return Token(store=store, clock=clock, authority=auth, events=events, verbose=False)


@pytest.fixture
def xdl_token(token, auth):
    """Token with XDL created and issued by the contract account."""
    with auth.signed(DEFAULT_CONTRACT_ACCOUNT):
        token.create(DEFAULT_CONTRACT_ACCOUNT, MAX_SUPPLY)
    return token


@pytest.fixture
def issued_token(token, auth):
    """Token with XDL created with "issuer" as issuer."""
    with auth.signed(DEFAULT_CONTRACT_ACCOUNT):
        token.create("issuer", MAX_SUPPLY)
    return token


@pytest.fixture
def coin():
    return COIN_SYMBOL


@pytest.fixture
def conserved():
    """The ledger_is_conserved check, for tests that take a token."""
    return ledger_is_conserved
