#!/usr/bin/env python3
"""
demo.py - Interactive Tutorial: Learn the UBI Ledger Step by Step

This is a pedagogical demonstration of the daily income token. Each step
builds on the previous one. Press Enter to advance.

WHAT YOU'LL LEARN:
  1-3:  Foundation  - Creating the currency, the first claim, the day counter
  4-6:  Income      - Daily claims, demurrage, the claim window
  7-8:  Shares      - Redirecting income, who absorbs the remainder
  9-10: Guarantees  - Atomic rejections, conservation of supply

Run:
    python demo.py           # Interactive mode (press Enter for each step)
    python demo.py --quick   # Run all steps without pausing
"""

from dataclasses import dataclass
import sys

from ubiledger import (
    Token, SignerSet, FixedClock, Asset, COIN_SYMBOL,
    DEFAULT_CONTRACT_ACCOUNT, MAX_PAST_CLAIM_DAYS,
    LedgerError, apply_decay, days_to_string,
)


# ============================================================================
# CONFIGURATION
# ============================================================================

@dataclass
class DemoConfig:
    """Configuration for the tutorial. Modify these to experiment."""
    # Day 19000 is 2022-01-08, after the signup bonus window.
    start_day: int = 19000
    max_supply: str = "1000000000.0000 XDL"

    # Accounts
    accounts: tuple = ("alice", "bob", "charlie", "dave")

    # Scenario parameters
    claim_gap_days: int = 10
    absence_days: int = 500
    bob_share_percent: int = 30
    charlie_share_percent: int = 70
    idle_balance: str = "1000.0000 XDL"


CONFIG = DemoConfig()

QUICK_MODE = "--quick" in sys.argv


def wait_for_enter():
    """Pause for user input unless in quick mode."""
    if not QUICK_MODE:
        input("\n[Press Enter to continue...]")


def step_header(number: int, title: str, objective: str):
    """Print a step header with learning objective."""
    print(f"\n{'='*70}")
    print(f"STEP {number}: {title}")
    print(f"{'='*70}")
    print(f"\nObjective: {objective}\n")


def section_header(text: str):
    """Print a section header within a step."""
    print(f"\n--- {text} ---\n")


def show_balances(token: Token):
    for owner, balance in sorted(token.store.balances_of(COIN_SYMBOL.code).items()):
        record = token.find_account(owner, COIN_SYMBOL.code)
        print(f"  {owner:<10} {str(balance):>22}   settled {record.last_settlement_day}")


# ============================================================================
# PHASE 1: FOUNDATION (Steps 1-3)
# ============================================================================

def step_01_create_currency():
    """Create the token and its currency."""
    step_header(1, "Creating the Currency",
        "A currency has a maximum supply and an issuer; nothing exists until claimed.")

    print("""
    The token needs three collaborators from its host:

    1. AUTHORITY - who signed the current action (SignerSet)
    2. CLOCK     - today's day counter (FixedClock lets us time travel)
    3. STORE     - keyed tables of balances, stats, shares (InMemoryStore)
    """)

    wait_for_enter()

    auth = SignerSet({DEFAULT_CONTRACT_ACCOUNT, *CONFIG.accounts})
    clock = FixedClock(CONFIG.start_day)
    token = Token(clock=clock, authority=auth, verbose=True)

    print(f'>>> token.create("{DEFAULT_CONTRACT_ACCOUNT}", Asset.parse("{CONFIG.max_supply}"))')
    with auth.signed(DEFAULT_CONTRACT_ACCOUNT):
        token.create(DEFAULT_CONTRACT_ACCOUNT, Asset.parse(CONFIG.max_supply))

    stats = token.get_stats(COIN_SYMBOL.code)
    section_header("Currency Statistics")
    print(f"Supply:     {stats.supply}")
    print(f"Max supply: {stats.max_supply}")
    print(f"Burned:     {stats.burned}")
    print(f"Claims:     {stats.claims}")

    return token, auth, clock


def step_02_first_claim(token: Token, auth: SignerSet):
    """Claim the first day of income."""
    step_header(2, "The First Claim",
        "A new account receives one coin for today as soon as it claims.")

    print('>>> token.claim("alice")')
    with auth.signed("alice"):
        result = token.claim("alice")

    section_header("Settlement Result")
    print(f"Claimed:        {result.claimed}")
    print(f"Claim days:     {result.claim_days}")
    print(f"Next claim day: {result.next_claim_day} ({days_to_string(result.next_claim_day)})")
    show_balances(token)

    section_header("Key Insight")
    print("""
    Income is not paid by a scheduler. It accrues silently and is settled
    whenever the account is touched: a claim, a transfer, a burn.
    """)


def step_03_day_counter(token: Token):
    """Show how days are counted."""
    step_header(3, "The Day Counter",
        "Days are whole multiples of 86400 seconds since 1970-01-01.")

    today = token.today()
    print(f"Today is day {today}, that is {days_to_string(today)}")
    print(f"Day 0 was {days_to_string(0)}")


# ============================================================================
# PHASE 2: INCOME (Steps 4-6)
# ============================================================================

def step_04_daily_income(token: Token, auth: SignerSet, clock: FixedClock):
    """Claim after several days."""
    step_header(4, "Accrued Income",
        "Every day not yet settled pays one coin.")

    print(f">>> clock.advance({CONFIG.claim_gap_days})")
    clock.advance(CONFIG.claim_gap_days)
    with auth.signed("alice"):
        result = token.claim("alice")

    print(f"Claim days: {result.claim_days}")
    print(f"Claimed:    {result.claimed}")
    print(f"Burned:     {result.burned}  (demurrage on the previous balance)")
    show_balances(token)


def step_05_demurrage(token: Token, auth: SignerSet, clock: FixedClock):
    """Demurrage on a large idle balance."""
    step_header(5, "Demurrage",
        "Balances lose 0.1% per year, computed in exact integer arithmetic.")

    amount = Asset.parse(CONFIG.idle_balance).amount
    for days in (1, 30, 365, 3650):
        kept, burned = apply_decay(amount, days)
        print(f"  {CONFIG.idle_balance} held {days:>5} days keeps "
              f"{Asset(kept, COIN_SYMBOL)} (burns {Asset(burned, COIN_SYMBOL)})")

    section_header("Key Insight")
    print("""
    No floating point is involved: whole years are applied as an exact
    fraction and the leftover days use an integer root, so every
    implementation burns exactly the same units.
    """)


def step_06_claim_window(token: Token, auth: SignerSet, clock: FixedClock):
    """Income older than the claim window is lost."""
    step_header(6, "The Claim Window",
        f"At most {MAX_PAST_CLAIM_DAYS} past days can be claimed; older income is lost.")

    with auth.signed("bob"):
        token.claim("bob")
    print(f">>> clock.advance({CONFIG.absence_days})")
    clock.advance(CONFIG.absence_days)
    with auth.signed("bob"):
        result = token.claim("bob")

    print(f"Claim days: {result.claim_days}")
    print(f"Lost days:  {result.lost_days}")
    memo = token.events.of_kind("income")[-1].params_dict["memo"]
    print(f"Memo:       {memo}")


# ============================================================================
# PHASE 3: SHARES (Steps 7-8)
# ============================================================================

def step_07_set_shares(token: Token, auth: SignerSet):
    """Redirect income to other accounts."""
    step_header(7, "Income Shares",
        "An account can give percentages of its future income away.")

    with auth.signed("alice"):
        token.setshare("alice", "bob", CONFIG.bob_share_percent)
        token.setshare("alice", "charlie", CONFIG.charlie_share_percent)
        print(">>> token.setshare('alice', 'dave', 10)   # would exceed 100%")
        try:
            token.setshare("alice", "dave", 10)
        except LedgerError as exc:
            print(f"Rejected: {exc}")

    for share in token.get_shares("alice"):
        print(f"  alice -> {share.beneficiary}: {share.percent}%")


def step_08_distribution(token: Token, auth: SignerSet, clock: FixedClock):
    """Claim with shares in place."""
    step_header(8, "Distribution",
        "Shares are paid in beneficiary order; the share reaching 100% absorbs the remainder.")

    clock.advance(3)
    with auth.signed("alice"):
        result = token.claim("alice")

    for portion in result.portions:
        print(f"  {portion.beneficiary:<10} {portion.percent:>3}%  {portion.quantity}")
    print(f"  residue to alice: {result.residue}")


# ============================================================================
# PHASE 4: GUARANTEES (Steps 9-10)
# ============================================================================

def step_09_atomicity(token: Token, auth: SignerSet, clock: FixedClock):
    """A failed action leaves no trace, settlement included."""
    step_header(9, "Atomic Rejections",
        "If any part of an action fails, its settlement is rolled back too.")

    clock.advance(7)
    before = token.find_account("dave", COIN_SYMBOL.code)
    with auth.signed("charlie"):
        print(">>> token.transfer('charlie', 'dave', <more than charlie holds>)")
        try:
            token.transfer("charlie", "dave", Asset.parse("1000000.0000 XDL"))
        except LedgerError as exc:
            print(f"Rejected: {exc}")
    print(f"Charlie still settled on day {token.find_account('charlie', COIN_SYMBOL.code).last_settlement_day}")
    print(f"Dave's row unchanged: {before == token.find_account('dave', COIN_SYMBOL.code)}")


def step_10_conservation(token: Token):
    """Supply always equals the sum of balances."""
    step_header(10, "Conservation",
        "Every mint and burn moves supply and balances together.")

    stats = token.get_stats(COIN_SYMBOL.code)
    total = Asset(token.store.total_balance(COIN_SYMBOL.code), COIN_SYMBOL)
    print(f"Sum of balances: {total}")
    print(f"Supply:          {stats.supply}")
    print(f"Burned so far:   {stats.burned}")
    print(f"Claims so far:   {stats.claims}")
    print(f"Conserved:       {total == stats.supply}")
    print(f"Actions logged:  {len(token.action_log)}")


def main():
    """Run the complete tutorial."""
    print("=" * 70)
    print("       UBI LEDGER - INTERACTIVE TUTORIAL")
    print("=" * 70)

    if QUICK_MODE:
        print("Running in QUICK mode (no pauses)")
    else:
        print("Running in INTERACTIVE mode (press Enter to advance)")

    wait_for_enter()

    token, auth, clock = step_01_create_currency()
    wait_for_enter()

    step_02_first_claim(token, auth)
    wait_for_enter()

    step_03_day_counter(token)
    wait_for_enter()

    step_04_daily_income(token, auth, clock)
    wait_for_enter()

    step_05_demurrage(token, auth, clock)
    wait_for_enter()

    step_06_claim_window(token, auth, clock)
    wait_for_enter()

    step_07_set_shares(token, auth)
    wait_for_enter()

    step_08_distribution(token, auth, clock)
    wait_for_enter()

    step_09_atomicity(token, auth, clock)
    wait_for_enter()

    step_10_conservation(token)

    print("\n" + "=" * 70)
    print("       TUTORIAL COMPLETE!")
    print("=" * 70)
    print("""
    Next steps:
      - See ubiledger/settlement.py for the decay-and-claim engine
      - Run tests: pytest tests/
    """)


if __name__ == "__main__":
    main()
