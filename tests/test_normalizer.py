"""Tests for price normalization across site price formats."""

import pytest

from pricetracker.scrapers.utils.normalizer import PriceNormalizer, PricePolicy


class TestIntegerPolicy:
    """Sites that store prices as integer pesos."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("$ 179.999", "179999"),
            ("$ 3.400", "3400"),
            ("149.999", "149999"),
            ("$ 1.200", "1200"),
            ("$ 169.999,00", "169999"),
            ("$ 1.234.567,89", "1234567"),
            ("$999", "999"),
        ],
    )
    def test_argentine_formats(self, raw, expected):
        assert PriceNormalizer.normalize(raw, PricePolicy.INTEGER) == expected

    def test_default_policy_is_integer(self):
        assert PriceNormalizer.normalize("$ 179.999") == "179999"

    def test_comma_thousands(self):
        """A comma followed by digit groups of three is a thousands separator."""
        assert PriceNormalizer.normalize("149,999") == "149999"
        assert PriceNormalizer.normalize("1,234,567") == "1234567"

    def test_comma_without_integer_part_is_left_alone(self):
        assert PriceNormalizer.normalize(",99") == ",99"


class TestDecimalPolicy:
    """Coto keeps the cents."""

    def test_integral_value_drops_zero_cents(self):
        assert PriceNormalizer.normalize("$4.865,00", PricePolicy.DECIMAL) == "4865"

    def test_cents_are_kept(self):
        assert PriceNormalizer.normalize("$4.865,50", PricePolicy.DECIMAL) == "4865.5"
        assert PriceNormalizer.normalize("$ 12,99", PricePolicy.DECIMAL) == "12.99"

    def test_dot_thousands_without_comma(self):
        assert PriceNormalizer.normalize("$ 4.865", PricePolicy.DECIMAL) == "4865"

    def test_decimal_output_is_kept(self):
        assert PriceNormalizer.normalize("4865.5", PricePolicy.DECIMAL) == "4865.5"


class TestIdempotence:
    @pytest.mark.parametrize("policy", list(PricePolicy))
    @pytest.mark.parametrize(
        "raw",
        ["$ 179.999", "$4.865,00", "$4.865,50", "149,999", "$ 3.400", "1200"],
    )
    def test_normalizing_twice_changes_nothing(self, raw, policy):
        once = PriceNormalizer.normalize(raw, policy)
        assert PriceNormalizer.normalize(once, policy) == once


class TestConcatenatedPrices:
    def test_repeated_price_is_repaired(self):
        assert PriceNormalizer.normalize("179999179999") == "179.999"

    def test_repair_keeps_first_half(self):
        assert PriceNormalizer.repair_concatenated("1234567890") == "12.345"

    def test_repair_bounds_prefix_length(self):
        assert PriceNormalizer.repair_concatenated("12345678901234567890") == "123.456"

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("$ 179.999 $ 179.999", "179.999"),
            ("$ 199.999 $ 179.999", "199.999"),
        ],
    )
    def test_dotted_prices_in_one_element_are_repaired(self, raw, expected):
        assert PriceNormalizer.normalize(raw) == expected

    def test_well_grouped_long_price_is_kept(self):
        assert PriceNormalizer.normalize("$ 1.234.567.890") == "1234567890"

    def test_short_digit_runs_are_untouched(self):
        assert PriceNormalizer.normalize("123456789") == "123456789"


class TestNeverRaises:
    @pytest.mark.parametrize("raw", ["", None, "Consultar precio", "$", "--"])
    def test_unrecognized_input_is_cleaned(self, raw):
        assert PriceNormalizer.normalize(raw) == ""

    def test_clean_strips_everything_but_separators(self):
        assert PriceNormalizer.clean("ARS $ 1.234,56 c/u") == "1.234,56"
