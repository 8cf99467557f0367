"""
store.py - Keyed record tables

The ledger store is an external collaborator of the engine: a set of keyed
tables supporting get / insert / update / delete. Every row remembers the
account that pays for its storage.

InMemoryStore is the dict-backed implementation used by Token, simulations
and tests. Records are immutable, so a snapshot is a shallow copy of each
table, and transaction() gives all-or-nothing semantics by restoring the
snapshot when the body raises.
"""

from __future__ import annotations
from contextlib import contextmanager
from typing import (
    Any, Callable, ContextManager, Dict, Generic, Hashable, Iterator, List, Optional,
    Protocol, Tuple, TypeVar,
)

from .core import (
    AccountBalance, Asset, CurrencyStats, Profile, Share,
    NotFoundError, ValidationError,
)


R = TypeVar("R")


class Table(Generic[R]):
    """
    A keyed table of immutable records.

    Attributes:
        name: Table name, used in error messages.
    """

    def __init__(self, name: str):
        self.name = name
        self._rows: Dict[Hashable, R] = {}
        self._payers: Dict[Hashable, str] = {}

    def find(self, key: Hashable) -> Optional[R]:
        """Return the record at `key`, or None."""
        return self._rows.get(key)

    def get(self, key: Hashable, message: Optional[str] = None) -> R:
        """
        Return the record at `key`.

        Raises:
            NotFoundError: If no record exists (with `message` if given)
        """
        try:
            return self._rows[key]
        except KeyError:
            raise NotFoundError(message or f"{self.name}: no record for {key!r}") from None

    def insert(self, key: Hashable, record: R, payer: str) -> R:
        """
        Add a new record, charging its storage to `payer`.

        Raises:
            ValidationError: If a record already exists at `key`
        """
        if key in self._rows:
            raise ValidationError(f"{self.name}: record for {key!r} already exists")
        self._rows[key] = record
        self._payers[key] = payer
        return record

    def update(self, key: Hashable, mutator: Callable[[R], R], payer: Optional[str] = None) -> R:
        """
        Replace the record at `key` with mutator(record).

        Args:
            key: Row key
            mutator: Function from the current record to the new record
            payer: New storage payer (None keeps the current one)

        Raises:
            NotFoundError: If no record exists at `key`
        """
        record = mutator(self.get(key))
        self._rows[key] = record
        if payer is not None:
            self._payers[key] = payer
        return record

    def delete(self, key: Hashable) -> None:
        """
        Remove the record at `key`.

        Raises:
            NotFoundError: If no record exists at `key`
        """
        if key not in self._rows:
            raise NotFoundError(f"{self.name}: no record for {key!r}")
        del self._rows[key]
        del self._payers[key]

    def payer_of(self, key: Hashable) -> str:
        """Return the account paying for the row at `key`."""
        self.get(key)
        return self._payers[key]

    def items(self) -> List[Tuple[Hashable, R]]:
        """All (key, record) pairs in ascending key order."""
        return sorted(self._rows.items(), key=lambda kv: kv[0])

    def __contains__(self, key: Hashable) -> bool:
        return key in self._rows

    def __len__(self) -> int:
        return len(self._rows)

    def _snapshot(self) -> Tuple[Dict[Hashable, R], Dict[Hashable, str]]:
        return dict(self._rows), dict(self._payers)

    def _restore(self, snapshot: Tuple[Dict[Hashable, R], Dict[Hashable, str]]) -> None:
        rows, payers = snapshot
        self._rows = dict(rows)
        self._payers = dict(payers)


class LedgerStore(Protocol):
    """
    Interface the engine uses to reach persistent state.

    Keys:
        accounts: (owner, symbol_code) -> AccountBalance
        stats: symbol_code -> CurrencyStats
        shares: (owner, beneficiary) -> Share
        profiles: owner -> Profile
    """
    accounts: Table[AccountBalance]
    stats: Table[CurrencyStats]
    shares: Table[Share]
    profiles: Table[Profile]

    def shares_of(self, owner: str) -> List[Share]:
        """The owner's shares, in ascending beneficiary order."""
        ...

    def snapshot(self) -> Any:
        ...

    def restore(self, snapshot: Any) -> None:
        ...

    def transaction(self) -> ContextManager[Any]:
        """All-or-nothing scope over every table."""
        ...


class InMemoryStore:
    """
    Dict-backed LedgerStore.

    Not thread-safe: one writer at a time is assumed, as the host
    serializes all actions.

    Example:
        store = InMemoryStore()
        with store.transaction():
            store.accounts.insert(("alice", "XDL"), record, payer="alice")
    """

    def __init__(self):
        self.accounts: Table[AccountBalance] = Table("accounts")
        self.stats: Table[CurrencyStats] = Table("stat")
        self.shares: Table[Share] = Table("shares")
        self.profiles: Table[Profile] = Table("profiles")

    def _tables(self) -> Tuple[Table, ...]:
        return (self.accounts, self.stats, self.shares, self.profiles)

    def shares_of(self, owner: str) -> List[Share]:
        return [share for (o, _), share in self.shares.items() if o == owner]

    def balances_of(self, symbol_code: str) -> Dict[str, Asset]:
        """All balances held in one currency, keyed by owner."""
        return {
            owner: record.balance
            for (owner, code), record in self.accounts.items()
            if code == symbol_code
        }

    def total_balance(self, symbol_code: str) -> int:
        """Sum of all balances in one currency, in smallest units."""
        return sum(asset.amount for asset in self.balances_of(symbol_code).values())

    def snapshot(self) -> Tuple[Any, ...]:
        """Capture the current contents of every table."""
        return tuple(table._snapshot() for table in self._tables())

    def restore(self, snapshot: Tuple[Any, ...]) -> None:
        """Return every table to a previously captured snapshot."""
        for table, saved in zip(self._tables(), snapshot):
            table._restore(saved)

    @contextmanager
    def transaction(self) -> Iterator[InMemoryStore]:
        """Apply the body's mutations together, or none of them if it raises."""
        saved = self.snapshot()
        try:
            yield self
        except BaseException:
            self.restore(saved)
            raise
