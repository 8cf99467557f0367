"""
Conformance Test Suite

This suite defines the NORMATIVE behavior of the UBI ledger.
Any compliant implementation MUST pass these tests.

The tests are organized by invariant:
1. conservation.py - Supply equals the sum of balances, within the cap
2. atomicity.py - All-or-nothing actions
3. idempotency.py - Repeated settlement on one day is a no-op
4. determinism.py - Reproducible burns, payouts and notifications
5. temporal.py - Day ordering of settlements and income

These tests use hypothesis for property-based testing.
"""
