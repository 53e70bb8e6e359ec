"""
Tests for the line-oriented transaction parser and date/amount helpers.
"""

from decimal import Decimal

import pytest

from extractor import TransactionExtractor, parse_transactions
from preprocess import DataPreprocessor


class TestExtractFromLine:
    """Tests for parsing individual statement lines."""

    def setup_method(self):
        self.extractor = TransactionExtractor()

    def test_debit_without_balance(self):
        """Test a signed amount with currency symbol and no balance."""
        txn = self.extractor.extract_from_line("01/02/2023 Coffee Shop -$4.50")

        assert txn is not None
        assert txn.raw_date == "01/02/2023"
        assert txn.description == "Coffee Shop"
        assert txn.amount == Decimal("-4.50")
        assert txn.balance is None

    def test_credit_with_trailing_balance(self):
        """Test that the last amount on the line becomes the balance."""
        txn = self.extractor.extract_from_line("2023-05-01 Payroll Deposit $3,500.00 $10,200.00")

        assert txn is not None
        assert txn.raw_date == "2023-05-01"
        assert txn.description == "Payroll Deposit"
        assert txn.amount == Decimal("3500.00")
        assert txn.balance == Decimal("10200.00")

    def test_balance_is_last_of_several_amounts(self):
        txn = self.extractor.extract_from_line("3/4/23 Transfer 10.00 20.00 30.00")

        assert txn.amount == Decimal("10.00")
        assert txn.balance == Decimal("30.00")

    def test_date_is_not_normalized(self):
        txn = self.extractor.extract_from_line("3-4-23 Transfer 10.00")

        assert txn.raw_date == "3-4-23"
        assert txn.date is None

    def test_description_is_trimmed(self):
        txn = self.extractor.extract_from_line("01/02/2023     Book Store      -12.00   ")

        assert txn.description == "Book Store"

    @pytest.mark.parametrize("line", [
        "Coffee Shop -$4.50",                     # no date
        "01/02/2023 Coffee Shop",                 # no amount
        "01/02/2023 Coffee Shop -4.5",            # one fraction digit
        "01/02/2023 -4.50",                       # empty description
        "4.50 01/02/2023 Coffee Shop",            # amount before date
        "01/02/2023-4.50 Coffee Shop",            # amount touches the date
        "Opening balance as of statement date",
    ])
    def test_lines_without_a_transaction(self, line):
        """Test that non-matching lines produce no transaction."""
        assert self.extractor.extract_from_line(line) is None

    def test_first_date_on_line_wins(self):
        txn = self.extractor.extract_from_line("01/02/2023 Refund for 12/30/2022 order 15.00")

        assert txn.raw_date == "01/02/2023"
        assert txn.description == "Refund for 12/30/2022 order"

    def test_plus_sign_and_large_amount(self):
        txn = self.extractor.extract_from_line("2023/01/31 Wire In +1,234,567.89")

        assert txn.amount == Decimal("1234567.89")


class TestExtractFromText:
    """Tests for parsing whole page text."""

    def test_line_order_preserved_and_blank_lines_skipped(self):
        text = (
            "ACME BANK\n"
            "\n"
            "01/02/2023 Coffee Shop -$4.50\n"
            "   \n"
            "Statement period 01/01/2023 - 01/31/2023\n"
            "2023-05-01 Payroll Deposit $3,500.00 $10,200.00\n"
        )

        transactions = parse_transactions(text)

        assert [t.description for t in transactions] == ["Coffee Shop", "Payroll Deposit"]

    def test_text_without_line_breaks_still_parses(self):
        """Test reduced recall on single-line text: only the first date is used."""
        text = "01/02/2023 Coffee Shop -$4.50 01/03/2023 Bakery -3.00"

        transactions = parse_transactions(text)

        assert len(transactions) == 1
        assert transactions[0].description == "Coffee Shop"
        assert transactions[0].balance == Decimal("-3.00")

    def test_empty_text(self):
        assert parse_transactions("") == []


class TestDataPreprocessor:
    """Tests for date normalization and amount cleaning."""

    def setup_method(self):
        self.preprocessor = DataPreprocessor(dayfirst=False)

    @pytest.mark.parametrize("raw, expected", [
        ("01/02/2023", "2023-01-02"),
        ("01-02-2023", "2023-01-02"),
        ("2023-05-01", "2023-05-01"),
        ("2023/5/1", "2023-05-01"),
        ("1/2/23", "2023-01-02"),
    ])
    def test_normalize_date(self, raw, expected):
        assert self.preprocessor.normalize_date(raw) == expected

    @pytest.mark.parametrize("raw", ["13/45/2023", "2023-13-45", "99-99-99"])
    def test_unparseable_date_is_kept(self, raw):
        """Test that normalization never raises and returns the raw text."""
        assert self.preprocessor.normalize_date(raw) == raw

    def test_dayfirst(self):
        preprocessor = DataPreprocessor(dayfirst=True)

        assert preprocessor.normalize_date("01/02/2023") == "2023-02-01"

    @pytest.mark.parametrize("raw", ["13/01/2023", "31/12/2023"])
    def test_day_first_date_kept_when_month_first(self, raw):
        """Test that dates are never read in the other field order."""
        assert self.preprocessor.normalize_date(raw) == raw

    def test_month_first_date_kept_when_day_first(self):
        preprocessor = DataPreprocessor(dayfirst=True)

        assert preprocessor.normalize_date("12/31/2023") == "12/31/2023"
        assert preprocessor.normalize_date("2023/01/02") == "2023-01-02"

    @pytest.mark.parametrize("raw, expected", [
        ("-$4.50", Decimal("-4.50")),
        ("$3,500.00", Decimal("3500.00")),
        ("+12.00", Decimal("12.00")),
        ("£1,000.10", Decimal("1000.10")),
    ])
    def test_clean_amount(self, raw, expected):
        assert self.preprocessor.clean_amount(raw) == expected

    def test_clean_amount_rejects_non_numeric(self):
        assert self.preprocessor.clean_amount("$-") is None

    def test_split_lines(self):
        assert self.preprocessor.split_lines("a\n\n  \nb\r\nc") == ["a", "b", "c"]
