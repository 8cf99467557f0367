"""
authority.py - Authorization collaborator

Signature verification belongs to the host. The engine only asks whether an
actor authorized the current action and whether an account exists.
"""

from __future__ import annotations
from contextlib import contextmanager
from typing import FrozenSet, Iterable, Iterator, Protocol, Set, runtime_checkable

from .core import AuthorizationError


@runtime_checkable
class Authority(Protocol):
    """Capability checks supplied by the host."""

    def require_auth(self, actor: str) -> None:
        """Raise AuthorizationError unless `actor` authorized the current action."""
        ...

    def has_auth(self, actor: str) -> bool:
        ...

    def is_account(self, name: str) -> bool:
        ...


class SignerSet:
    """
    Authority backed by a set of known accounts and the current signers.

    Example:
        auth = SignerSet({"dailycoin", "alice", "bob"})
        with auth.signed("alice"):
            token.transfer("alice", "bob", Asset.parse("1.0000 XDL"), "hi")
    """

    def __init__(self, accounts: Iterable[str] = ()):
        self._accounts: Set[str] = set(accounts)
        self._signers: FrozenSet[str] = frozenset()

    @property
    def signers(self) -> FrozenSet[str]:
        return self._signers

    def add_account(self, name: str) -> str:
        if not name or not name.strip():
            raise ValueError("account name cannot be empty")
        self._accounts.add(name)
        return name

    def is_account(self, name: str) -> bool:
        return name in self._accounts

    def has_auth(self, actor: str) -> bool:
        return actor in self._signers

    def require_auth(self, actor: str) -> None:
        if actor not in self._signers:
            raise AuthorizationError(f"missing authority of {actor}")

    @contextmanager
    def signed(self, *actors: str) -> Iterator[SignerSet]:
        """Run the body with `actors` as the signers of every action in it."""
        previous = self._signers
        self._signers = frozenset(actors)
        try:
            yield self
        finally:
            self._signers = previous
