"""
token.py - UBI token with demurrage

The Token class is the host-facing surface of the ledger. It is the only
module that runs actions against the store, ensuring controlled and
auditable changes.

Key responsibilities:
    - Validates inputs and authority before mutating anything
    - Settles decay and income (settlement.settle) for an account before
      its funds move, so balances are always current when debited
    - Runs every action atomically: on any error the store and the
      action's notifications are rolled back and the error is re-raised
    - Keeps an action log and forwards notifications of applied actions
"""

from __future__ import annotations
from dataclasses import replace
from typing import Callable, List, Optional, TypeVar

from .authority import Authority, SignerSet
from .clock import Clock, SystemClock
from .core import (
    AccountBalance, ActionRecord, Asset, CurrencyStats, Notification, Profile,
    Share, Symbol,
    MAX_PROFILE_BYTES, NOTIFY_BURN,
    LedgerError, NotFoundError, ValidationError,
    check_memo, check_quantity,
)
from .events import EventLog, EventSink
from .policy import UbiPolicy, DEFAULT_POLICY
from .settlement import SettlementResult, credit, debit, settle
from .store import InMemoryStore, LedgerStore


T = TypeVar("T")

DEFAULT_CONTRACT_ACCOUNT = "dailycoin"


class Token:
    """
    Fungible token paying a daily income, with demurrage and income shares.

    Example:
        auth = SignerSet({"dailycoin", "alice", "bob"})
        clock = FixedClock(19000)
        token = Token(clock=clock, authority=auth, verbose=False)

        with auth.signed("dailycoin"):
            token.create("dailycoin", Asset.parse("1000000.0000 XDL"))
        with auth.signed("alice"):
            token.claim("alice")                     # 1.0000 XDL of income
            token.setshare("alice", "bob", 50)       # half of future income to bob
        clock.advance(3)
        with auth.signed("alice"):
            token.transfer("alice", "bob", Asset.parse("0.5000 XDL"), "thanks")
    """

    def __init__(
        self,
        store: Optional[LedgerStore] = None,
        clock: Optional[Clock] = None,
        authority: Optional[Authority] = None,
        policy: UbiPolicy = DEFAULT_POLICY,
        events: Optional[EventSink] = None,
        contract_account: str = DEFAULT_CONTRACT_ACCOUNT,
        verbose: bool = True,
    ):
        """
        Create a token.

        Args:
            store: Ledger store (default: a new InMemoryStore)
            clock: Day counter source (default: SystemClock)
            authority: Authorization checks (default: SignerSet knowing only
                the contract account)
            policy: Engine parameters (default: DEFAULT_POLICY)
            events: Receiver of notifications (default: a new EventLog)
            contract_account: Account the token itself runs as
            verbose: Print one line per applied or rejected action
        """
        self.store = store if store is not None else InMemoryStore()
        self.clock = clock or SystemClock()
        self.authority = authority or SignerSet({contract_account})
        self.policy = policy
        self.events = events if events is not None else EventLog()
        self.contract_account = contract_account
        self.verbose = verbose
        self.action_log: List[ActionRecord] = []
        self._next_sequence = 0
        self._pending: List[Notification] = []

    def today(self) -> int:
        return self.clock.today()

    # ========================================================================
    # READ-ONLY ACCESS
    # ========================================================================

    def get_stats(self, symbol_code: str) -> CurrencyStats:
        return self.store.stats.get(symbol_code, f"symbol {symbol_code} does not exist")

    def get_supply(self, symbol_code: str) -> Asset:
        return self.get_stats(symbol_code).supply

    def find_account(self, owner: str, symbol_code: str) -> Optional[AccountBalance]:
        return self.store.accounts.find((owner, symbol_code))

    def get_balance(self, owner: str, symbol_code: str) -> Asset:
        """
        Stored balance of `owner`, without settling pending decay or income.

        Raises:
            NotFoundError: If the owner has no balance record
        """
        return self.store.accounts.get(
            (owner, symbol_code), f"no balance object found for {owner}"
        ).balance

    def get_shares(self, owner: str) -> List[Share]:
        """The owner's shares, in the order income is distributed."""
        return sorted(self.store.shares_of(owner), key=lambda s: s.beneficiary)

    def get_profile(self, owner: str) -> Optional[str]:
        profile = self.store.profiles.find(owner)
        return profile.text if profile else None

    # ========================================================================
    # ACTION EXECUTION
    # ========================================================================

    def _emit(self, notification: Notification) -> None:
        self._pending.append(notification)

    def _execute(self, action: str, summary: str, body: Callable[[], T]) -> T:
        """
        Run `body` as one atomic action.

        On success the action is logged and its notifications forwarded to
        the event sink. On failure the store is restored, the notifications
        are dropped and the exception propagates.
        """
        self._pending = []
        try:
            with self.store.transaction():
                result = body()
        except Exception as exc:
            self._pending = []
            if self.verbose and isinstance(exc, LedgerError):
                print(f"✗ REJECTED: {action} {summary}: {exc}")
            raise

        notifications = tuple(self._pending)
        self._pending = []
        record = ActionRecord(
            sequence_number=self._next_sequence,
            action=action,
            day=self.today(),
            notifications=notifications,
            result=result,
        )
        self._next_sequence += 1
        self.action_log.append(record)
        for notification in notifications:
            self.events.emit(notification)
        if self.verbose:
            print(f"✓ APPLIED: {action} {summary}")
        return result

    def _settle(self, owner: str, symbol: Symbol, payer: str, fail: bool = False) -> SettlementResult:
        return settle(
            self.store, owner, symbol, payer, self.today(),
            policy=self.policy, emit=self._emit, fail_if_nothing_due=fail,
        )

    def _currency(self, quantity: Asset, missing: str) -> CurrencyStats:
        stats = self.store.stats.find(quantity.symbol.code)
        if stats is None:
            raise NotFoundError(missing)
        return stats

    @staticmethod
    def _check_symbol(quantity: Asset, stats: CurrencyStats) -> None:
        if quantity.symbol != stats.symbol:
            raise ValidationError("symbol precision mismatch")

    # ========================================================================
    # CURRENCY ACTIONS
    # ========================================================================

    def create(self, issuer: str, maximum_supply: Asset) -> CurrencyStats:
        """
        Create a currency with a fixed maximum supply.

        Requires the contract account's authority.
        """
        def body() -> CurrencyStats:
            self.authority.require_auth(self.contract_account)
            symbol = maximum_supply.symbol
            if not maximum_supply.is_valid():
                raise ValidationError("invalid supply")
            if maximum_supply.amount <= 0:
                raise ValidationError("max-supply must be positive")
            if symbol.precision != self.policy.symbol_precision:
                raise ValidationError("unsupported symbol precision")
            if symbol.code in self.store.stats:
                raise ValidationError("token with symbol already exists")
            zero = Asset.zero(symbol)
            stats = CurrencyStats(
                supply=zero, max_supply=maximum_supply, issuer=issuer, burned=zero, claims=0,
            )
            return self.store.stats.insert(symbol.code, stats, self.contract_account)

        return self._execute("create", f"{maximum_supply} issuer={issuer}", body)

    def issue(self, to: str, quantity: Asset, memo: str = "") -> None:
        """
        Mint `quantity` to the issuer and pass it on to `to`.

        Requires the issuer's authority. The issuer is settled before the
        new coins reach its balance.
        """
        def body() -> None:
            check_memo(memo)
            stats = self._currency(quantity, "token with symbol does not exist, create token before issue")
            self.authority.require_auth(stats.issuer)
            check_quantity(quantity, "issue")
            self._check_symbol(quantity, stats)

            code = stats.symbol.code
            issuer = stats.issuer
            if (issuer, code) not in self.store.accounts:
                self.store.accounts.insert((issuer, code), AccountBalance(Asset.zero(stats.symbol), 0), issuer)
            self._settle(issuer, stats.symbol, issuer)

            stats = self.store.stats.get(code)
            if quantity.amount > stats.available.amount:
                raise ValidationError("quantity exceeds available supply")
            self.store.stats.update(code, lambda s: replace(s, supply=s.supply + quantity))
            credit(self.store, issuer, quantity, issuer)

            if to != issuer:
                self._transfer(issuer, to, quantity, memo)

        return self._execute("issue", f"{quantity} to {to}", body)

    def retire(self, quantity: Asset, memo: str = "") -> None:
        """
        Destroy `quantity` from the issuer's balance.

        Requires the issuer's authority, unless the issuer is the contract
        account itself (then anyone may retire).
        """
        def body() -> None:
            check_memo(memo)
            stats = self._currency(quantity, "token with symbol does not exist")
            if stats.issuer != self.contract_account:
                self.authority.require_auth(stats.issuer)
            check_quantity(quantity, "retire")
            self._check_symbol(quantity, stats)

            self._settle(stats.issuer, stats.symbol, stats.issuer)
            debit(self.store, stats.issuer, quantity)
            self.store.stats.update(
                stats.symbol.code,
                lambda s: replace(s, supply=s.supply - quantity, burned=s.burned + quantity),
            )

        return self._execute("retire", f"{quantity}", body)

    def burn(self, owner: str, quantity: Asset) -> None:
        """Destroy `quantity` from the owner's own balance."""
        def body() -> None:
            self.authority.require_auth(owner)
            stats = self._currency(quantity, "token with symbol does not exist")
            check_quantity(quantity, "burn")
            self._check_symbol(quantity, stats)

            self._settle(owner, stats.symbol, owner)
            debit(self.store, owner, quantity)
            self.store.stats.update(
                stats.symbol.code,
                lambda s: replace(s, supply=s.supply - quantity, burned=s.burned + quantity),
            )
            self._emit(Notification.of(NOTIFY_BURN, owner=owner, quantity=quantity, memo="burn"))

        return self._execute("burn", f"{quantity} from {owner}", body)

    # ========================================================================
    # TRANSFERS
    # ========================================================================

    def _transfer(self, from_: str, to: str, quantity: Asset, memo: str) -> None:
        if from_ == to:
            raise ValidationError("cannot transfer to self")
        self.authority.require_auth(from_)
        if not self.authority.is_account(to):
            raise ValidationError("to account does not exist")
        stats = self._currency(quantity, "symbol does not exist")
        check_quantity(quantity, "transfer")
        self._check_symbol(quantity, stats)
        check_memo(memo)

        payer = to if self.authority.has_auth(to) else from_

        # Pending decay and income of both sides are settled before funds move.
        self._settle(from_, stats.symbol, payer)
        if (to, stats.symbol.code) in self.store.accounts:
            self._settle(to, stats.symbol, payer)

        debit(self.store, from_, quantity)
        credit(self.store, to, quantity, payer)

    def transfer(self, from_: str, to: str, quantity: Asset, memo: str = "") -> None:
        """
        Move `quantity` from `from_` to `to`.

        Requires the sender's authority. Both sides are settled first; the
        recipient only when it already holds a row. Storage for every row the
        transfer creates, the recipient's row and the rows its settlement
        opens for the recipient's beneficiaries alike, is paid by the
        recipient when it also signed, else by the sender.
        """
        return self._execute(
            "transfer", f"{quantity}: {from_}→{to}",
            lambda: self._transfer(from_, to, quantity, memo),
        )

    # ========================================================================
    # ACCOUNT ROWS AND INCOME
    # ========================================================================

    def _open(self, owner: str, symbol: Symbol, ram_payer: str, fail: bool = False) -> SettlementResult:
        self.authority.require_auth(ram_payer)
        stats = self.store.stats.get(symbol.code, "symbol does not exist")
        if stats.symbol != symbol:
            raise ValidationError("symbol precision mismatch")
        key = (owner, symbol.code)
        if key not in self.store.accounts:
            self.store.accounts.insert(key, AccountBalance(Asset.zero(symbol), 0), ram_payer)
        return self._settle(owner, symbol, ram_payer, fail)

    def open(self, owner: str, symbol: Symbol, ram_payer: str) -> SettlementResult:
        """
        Create the owner's balance row (paid by `ram_payer`) if missing, and
        settle any pending income. A new account receives its first day of
        income immediately.
        """
        return self._execute(
            "open", f"{owner} {symbol}",
            lambda: self._open(owner, symbol, ram_payer),
        )

    def close(self, owner: str, symbol: Symbol) -> None:
        """
        Delete the owner's empty balance row.

        Refused while the balance is non-zero, when income was already
        settled today, or before the signup bonus window has ended.
        """
        def body() -> None:
            self.authority.require_auth(owner)
            key = (owner, symbol.code)
            record = self.store.accounts.find(key)
            if record is None:
                raise NotFoundError(
                    "Balance row already deleted or never existed. Action won't have any effect."
                )
            if record.balance.amount != 0:
                raise ValidationError("Cannot close because the balance is not zero.")
            today = self.today()
            if record.last_settlement_day != 0 and record.last_settlement_day >= today:
                raise ValidationError("Cannot close() yet: income was already claimed for today.")
            cutoff = self.policy.signup_bonus_until
            if cutoff is not None and today <= cutoff:
                raise ValidationError("Cannot close() yet: must wait for the end of the reward period.")
            self.store.accounts.delete(key)

        return self._execute("close", f"{owner} {symbol}", body)

    def claim(
        self,
        owner: str,
        symbol: Optional[Symbol] = None,
        fail_if_nothing_due: bool = False,
    ) -> SettlementResult:
        """
        Settle the owner's decay and income, opening its row if needed.

        Args:
            owner: Claimant, also paying for any row created
            symbol: Currency (default: the policy's coin symbol)
            fail_if_nothing_due: Raise NothingDueError / NoCoinsAvailableError
                instead of returning a result with nothing paid
        """
        symbol = symbol or self.policy.coin_symbol
        return self._execute(
            "claim", f"{owner} {symbol}",
            lambda: self._open(owner, symbol, owner, fail_if_nothing_due),
        )

    def claimfor(self, owner: str, ram_payer: str, symbol: Optional[Symbol] = None) -> SettlementResult:
        """Settle on behalf of `owner`, with `ram_payer` paying for new rows."""
        symbol = symbol or self.policy.coin_symbol
        return self._execute(
            "claimfor", f"{owner} payer={ram_payer}",
            lambda: self._open(owner, symbol, ram_payer),
        )

    # ========================================================================
    # INCOME SHARES
    # ========================================================================

    def setshare(self, owner: str, to: str, percent: int) -> None:
        """
        Redirect `percent` of the owner's future income to `to`.

        A percent of 0 removes the share. Rejected when the owner's shares
        would total more than 100%.
        """
        def body() -> None:
            self.authority.require_auth(owner)
            if isinstance(percent, bool) or not isinstance(percent, int) or not 0 <= percent <= 100:
                raise ValidationError("invalid percent value")
            if owner == to:
                raise ValidationError("cannot setshare to self")
            if not self.authority.is_account(to):
                raise ValidationError("to account does not exist")

            key = (owner, to)
            if key not in self.store.shares:
                if percent > 0:
                    self.store.shares.insert(key, Share(owner, to, percent), owner)
            elif percent > 0:
                self.store.shares.update(key, lambda s: replace(s, percent=percent))
            else:
                self.store.shares.delete(key)

            if sum(s.percent for s in self.store.shares_of(owner)) > 100:
                raise ValidationError("share total would exceed 100%")

        return self._execute("setshare", f"{owner}→{to} {percent}%", body)

    def resetshare(self, owner: str) -> None:
        """Remove every share of the owner."""
        def body() -> None:
            self.authority.require_auth(owner)
            for share in self.store.shares_of(owner):
                self.store.shares.delete((owner, share.beneficiary))

        return self._execute("resetshare", owner, body)

    # ========================================================================
    # PROFILES
    # ========================================================================

    def setprofile(self, owner: str, profile: str) -> None:
        """Publish the owner's profile text; an empty text removes it."""
        def body() -> None:
            self.authority.require_auth(owner)
            check_memo(profile, MAX_PROFILE_BYTES, "profile")
            if owner not in self.store.profiles:
                if profile:
                    self.store.profiles.insert(owner, Profile(owner, profile), owner)
            elif profile:
                self.store.profiles.update(owner, lambda p: replace(p, text=profile), owner)
            else:
                self.store.profiles.delete(owner)

        return self._execute("setprofile", owner, body)
