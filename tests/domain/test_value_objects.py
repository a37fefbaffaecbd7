"""Unit tests for domain value objects."""

from decimal import Decimal

import pytest

from formscli.domain.exceptions import InvalidArgumentError, ValidationError
from formscli.domain.model.value_objects import Money, Version


# ── Money ────────────────────────────────────────────────────────────────────


class TestMoney:

    def test_creation(self):
        m = Money(Decimal("10.50"))
        assert m.amount == Decimal("10.50")
        assert m.currency == "USD"

    def test_of_factory_from_string(self):
        assert Money.of("25.99").amount == Decimal("25.99")

    def test_of_factory_strips_thousands_separators(self):
        assert Money.of("1,234.50").amount == Decimal("1234.50")

    def test_of_factory_rejects_garbage(self):
        with pytest.raises(ValidationError, match="Invalid money amount"):
            Money.of("ten")

    def test_float_amount_rejected(self):
        with pytest.raises(ValidationError, match="must be a Decimal"):
            Money(10.5)

    def test_usd_display(self):
        assert str(Money.of("1234.5")) == "$1,234.50"

    def test_euro_display_uses_suffix(self):
        assert str(Money.of("10", "EUR")) == "10.00 €"

    def test_yen_has_no_decimals(self):
        assert str(Money.of("500", "JPY")) == "¥500"

    def test_unknown_currency_shown_as_code(self):
        assert str(Money.of("3", "CHF")) == "3.00 CHF"

    def test_negative_amount_keeps_sign(self):
        assert str(Money.of("-2")) == "-$2.00"


# ── Version ──────────────────────────────────────────────────────────────────


class TestVersion:

    def test_numeric_comparison(self):
        assert Version.parse("1.9.17.10") > Version.parse("1.9.17.8")

    def test_shorter_version_is_lower(self):
        assert Version.parse("1.9") < Version.parse("1.9.17.8")

    def test_trailing_zeros_ignored(self):
        assert Version.parse("2.4") == Version.parse("2.4.0")

    def test_prerelease_suffix_ignored(self):
        assert Version.parse("2.5-beta-1") == Version.parse("2.5")

    def test_invalid_version_rejected(self):
        with pytest.raises(InvalidArgumentError, match="Invalid version"):
            Version.parse("latest")

    def test_str(self):
        assert str(Version.parse("1.9.17.8")) == "1.9.17.8"
