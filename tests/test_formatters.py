"""Tests for currency, weight, percentage and date formatting."""

from __future__ import annotations

import unittest
from datetime import date, datetime

from core.errors import ParseError
from core.formatters import (
    customer_status_label,
    format_amount,
    format_currency,
    format_currency_input,
    format_date,
    format_percent,
    format_weight,
    is_ambiguous_date,
    low_stock_level,
    parse_currency,
    parse_decimal,
    parse_int,
    parse_sale_date,
    product_option_label,
    sale_status_label,
    stock_status,
    to_iso_date,
)


class CurrencyTests(unittest.TestCase):
    """Validates BRL masking and parsing."""

    def test_format_currency_groups_thousands(self) -> None:
        self.assertEqual(format_currency(1999.0), "R$ 1.999,00")
        self.assertEqual(format_currency(1234567.891), "R$ 1.234.567,89")

    def test_input_mask_reads_digits_as_cents(self) -> None:
        self.assertEqual(format_currency_input("5000"), "R$ 50,00")
        self.assertEqual(format_currency_input("R$ 1.999,00"), "R$ 1.999,00")
        self.assertEqual(format_currency_input("abc"), "")

    def test_masked_digits_parse_back_to_cents_value(self) -> None:
        for digits in ["0", "1", "99", "100", "5000", "199900", "123456789"]:
            with self.subTest(digits=digits):
                self.assertAlmostEqual(
                    parse_currency(format_currency_input(digits)), int(digits) / 100, places=6
                )

    def test_parse_currency_accepts_plain_decimals(self) -> None:
        self.assertEqual(parse_currency("R$ 50,00"), 50.0)
        self.assertEqual(parse_currency("50"), 50.0)
        self.assertEqual(parse_currency("50.5"), 50.5)
        self.assertEqual(parse_currency(12), 12.0)

    def test_dots_group_thousands_when_the_text_is_brl(self) -> None:
        cases = {
            "R$ 1.000": 1000.0,
            "R$ 1.999": 1999.0,
            "1.000": 1000.0,
            "1.234.567": 1234567.0,
            "R$ 1.234.567,89": 1234567.89,
        }
        for text, expected in cases.items():
            with self.subTest(text=text):
                self.assertEqual(parse_currency(text), expected)

    def test_format_amount_handles_missing_values(self) -> None:
        self.assertEqual(format_amount(10), "R$ 10,00")
        self.assertEqual(format_amount("6999.0"), "R$ 6.999,00")
        self.assertEqual(format_amount(float("nan")), "-")
        self.assertEqual(format_amount(None), "-")
        self.assertEqual(format_amount(float("nan"), missing=""), "")

    def test_parse_currency_rejects_garbage(self) -> None:
        for text in ["", "abc", "inf", "nan"]:
            with self.subTest(text=text):
                with self.assertRaises(ParseError):
                    parse_currency(text)


class NumberTests(unittest.TestCase):
    """Validates weight, decimal, integer and percentage helpers."""

    def test_format_weight_normalizes_separator(self) -> None:
        self.assertEqual(format_weight("0,2"), "0.20")
        self.assertEqual(format_weight("1.5 kg"), "1.50")
        self.assertEqual(format_weight("abc"), "abc")

    def test_parse_decimal(self) -> None:
        self.assertEqual(parse_decimal("0,2"), 0.2)
        self.assertEqual(parse_decimal("3"), 3.0)
        with self.assertRaises(ParseError):
            parse_decimal("x")

    def test_parse_int_requires_integer_literal(self) -> None:
        self.assertEqual(parse_int("10"), 10)
        self.assertEqual(parse_int(" -1 "), -1)
        with self.assertRaises(ParseError):
            parse_int("10.5")

    def test_format_percent(self) -> None:
        self.assertEqual(format_percent(0.45), "45%")
        self.assertEqual(format_percent(0.125, 1), "12,5%")


class DateTests(unittest.TestCase):
    """Validates the ordered date pattern chain."""

    def test_each_accepted_pattern(self) -> None:
        expected = date(2024, 1, 15)
        for text in ["15/01/2024", "15-01-2024", "2024-01-15", "2024/01/15"]:
            with self.subTest(text=text):
                self.assertEqual(parse_sale_date(text), expected)

    def test_day_first_wins_for_ambiguous_dates(self) -> None:
        self.assertEqual(parse_sale_date("01/02/2024"), date(2024, 2, 1))
        self.assertTrue(is_ambiguous_date("01/02/2024"))
        self.assertFalse(is_ambiguous_date("15/01/2024"))
        self.assertFalse(is_ambiguous_date("2024-01-02"))

    def test_invalid_calendar_dates_are_rejected(self) -> None:
        self.assertIsNone(parse_sale_date("31/02/2024"))
        self.assertIsNone(parse_sale_date("ontem"))
        self.assertIsNone(parse_sale_date(""))
        self.assertIsNone(parse_sale_date(None))

    def test_date_objects_and_timestamps(self) -> None:
        self.assertEqual(parse_sale_date(datetime(2024, 3, 5, 10, 30)), date(2024, 3, 5))
        self.assertEqual(parse_sale_date("2024-03-05T10:30:00+00:00"), date(2024, 3, 5))

    def test_iso_and_display_conversion(self) -> None:
        self.assertEqual(to_iso_date("20/05/2023"), "2023-05-20")
        self.assertEqual(to_iso_date("sem data"), "sem data")
        self.assertEqual(format_date("2023-05-20"), "20/05/2023")
        self.assertEqual(format_date("sem data"), "sem data")


class StatusLabelTests(unittest.TestCase):
    """Validates badge labels and derived stock status."""

    def test_sale_status_labels(self) -> None:
        self.assertEqual(sale_status_label("entregue"), "Entregue")
        self.assertEqual(sale_status_label("devolvido"), "devolvido")

    def test_customer_status_labels(self) -> None:
        self.assertEqual(customer_status_label("inativo"), "Inativo")
        self.assertEqual(customer_status_label("???"), "???")

    def test_stock_status_threshold(self) -> None:
        self.assertEqual(stock_status(6), "Em estoque")
        self.assertEqual(stock_status(5), "Estoque baixo")
        self.assertEqual(low_stock_level(2), "Crítico")
        self.assertEqual(low_stock_level(4), "Baixo")

    def test_product_option_shows_stock(self) -> None:
        self.assertEqual(product_option_label("Mouse", 3), "Mouse (Estoque: 3)")


if __name__ == "__main__":
    unittest.main()
