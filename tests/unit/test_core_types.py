"""
test_core_types.py - Unit tests for Symbol, Asset and records

Tests:
- Symbol validation and parsing
- Asset parsing and rendering
- Checked arithmetic and comparisons
- Notification payload access
"""

import pytest
from decimal import Decimal

from ubiledger import (
    Symbol, Asset, CurrencyStats, Notification,
    ValidationError, COIN_SYMBOL, MAX_ASSET_AMOUNT,
)
from ubiledger.core import check_memo, check_quantity


class TestSymbol:
    """Tests for Symbol."""

    def test_valid_symbol(self):
        sym = Symbol("XDL", 4)
        assert sym.code == "XDL"
        assert sym.precision == 4
        assert sym.multiplier == 10000

    def test_default_precision(self):
        assert Symbol("XDL") == COIN_SYMBOL

    @pytest.mark.parametrize("code", ["", "xdl", "X1", "TOOLONGSYM", "X DL"])
    def test_invalid_code_rejected(self, code):
        with pytest.raises(ValidationError, match="invalid symbol name"):
            Symbol(code, 4)

    @pytest.mark.parametrize("precision", [-1, 19])
    def test_invalid_precision_rejected(self, precision):
        with pytest.raises(ValidationError, match="invalid symbol precision"):
            Symbol("XDL", precision)

    def test_parse(self):
        assert Symbol.parse("4,XDL") == Symbol("XDL", 4)
        assert str(Symbol("EOS", 2)) == "2,EOS"

    def test_parse_malformed(self):
        with pytest.raises(ValidationError, match="invalid symbol"):
            Symbol.parse("XDL")


class TestAssetParsing:
    """Tests for Asset.parse and str()."""

    def test_parse_and_render(self):
        a = Asset.parse("1.0000 XDL")
        assert a.amount == 10000
        assert a.symbol == COIN_SYMBOL
        assert str(a) == "1.0000 XDL"

    def test_precision_from_fraction_digits(self):
        a = Asset.parse("12.50 EUR")
        assert a.symbol == Symbol("EUR", 2)
        assert a.amount == 1250

    def test_negative_render(self):
        assert str(Asset(-5, COIN_SYMBOL)) == "-0.0005 XDL"

    def test_zero_precision_render(self):
        assert str(Asset(42, Symbol("PTS", 0))) == "42 PTS"

    def test_to_decimal(self):
        assert Asset.parse("3.1415 XDL").to_decimal() == Decimal("3.1415")

    @pytest.mark.parametrize("text", ["1.0000", "abc XDL", "1.0000  XDL", "NaN XDL"])
    def test_parse_malformed(self, text):
        with pytest.raises(ValidationError):
            Asset.parse(text)

    def test_amount_must_be_int(self):
        with pytest.raises(ValidationError, match="must be an integer"):
            Asset(1.5, COIN_SYMBOL)
        with pytest.raises(ValidationError, match="must be an integer"):
            Asset(True, COIN_SYMBOL)


class TestAssetArithmetic:
    """Tests for checked arithmetic."""

    def test_add_sub(self):
        a = Asset(10000, COIN_SYMBOL)
        b = Asset(2500, COIN_SYMBOL)
        assert (a + b).amount == 12500
        assert (a - b).amount == 7500
        assert (-a).amount == -10000

    def test_symbol_mismatch(self):
        a = Asset(1, COIN_SYMBOL)
        b = Asset(1, Symbol("EOS", 4))
        with pytest.raises(ValidationError, match="different symbol"):
            a + b
        with pytest.raises(ValidationError, match="different symbol"):
            a < b

    def test_precision_mismatch_is_different_symbol(self):
        with pytest.raises(ValidationError, match="different symbol"):
            Asset(1, COIN_SYMBOL) - Asset(1, Symbol("XDL", 2))

    def test_overflow(self):
        big = Asset(MAX_ASSET_AMOUNT, COIN_SYMBOL)
        with pytest.raises(ValidationError, match="addition overflow"):
            big + Asset(1, COIN_SYMBOL)
        with pytest.raises(ValidationError, match="subtraction underflow"):
            (-big) - Asset(1, COIN_SYMBOL)

    def test_is_valid(self):
        assert Asset(MAX_ASSET_AMOUNT, COIN_SYMBOL).is_valid()
        assert not Asset(MAX_ASSET_AMOUNT + 1, COIN_SYMBOL).is_valid()

    def test_comparisons(self):
        one = Asset.parse("1.0000 XDL")
        two = Asset.parse("2.0000 XDL")
        assert one < two
        assert two > one
        assert one <= one
        assert two >= one
        assert one == Asset(10000, COIN_SYMBOL)

    def test_add_non_asset_is_type_error(self):
        with pytest.raises(TypeError):
            Asset(1, COIN_SYMBOL) + 1


class TestRecordsAndNotifications:
    """Tests for CurrencyStats and Notification helpers."""

    def test_stats_available(self):
        stats = CurrencyStats(
            supply=Asset.parse("40.0000 XDL"),
            max_supply=Asset.parse("100.0000 XDL"),
            issuer="issuer",
            burned=Asset.zero(COIN_SYMBOL),
        )
        assert stats.available == Asset.parse("60.0000 XDL")
        assert stats.symbol == COIN_SYMBOL
        assert stats.claims == 0

    def test_notification_params(self):
        n = Notification.of("income", to="alice", lost_days=3)
        assert n.kind == "income"
        assert n.params_dict == {"to": "alice", "lost_days": 3}
        assert n.params == (("to", "alice"), ("lost_days", 3))

    def test_notifications_are_hashable(self):
        n = Notification.of("burn", owner="alice", quantity=Asset(1, COIN_SYMBOL))
        assert n in {n}


class TestValidationHelpers:
    """Tests for memo and quantity checks."""

    def test_memo_limit(self):
        check_memo("x" * 256)
        with pytest.raises(ValidationError, match="memo has more than 256 bytes"):
            check_memo("x" * 257)

    def test_memo_counts_bytes(self):
        with pytest.raises(ValidationError):
            check_memo("é" * 129)

    def test_quantity_must_be_positive(self):
        with pytest.raises(ValidationError, match="must transfer positive quantity"):
            check_quantity(Asset(0, COIN_SYMBOL), "transfer")

    def test_quantity_must_be_valid(self):
        with pytest.raises(ValidationError, match="invalid quantity"):
            check_quantity(Asset(MAX_ASSET_AMOUNT + 1, COIN_SYMBOL), "issue")
