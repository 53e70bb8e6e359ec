import logging
from typing import List, Optional

from pydantic import ValidationError

from preprocess import AMOUNT_PATTERN, DATE_PATTERN, DataPreprocessor
from schema import Transaction

logger = logging.getLogger(__name__)


class TransactionExtractor:
    """Locates transaction records in raw page text, one line at a time."""

    def __init__(self, preprocessor: Optional[DataPreprocessor] = None):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.preprocessor = preprocessor or DataPreprocessor()

    def extract_from_text(self, text: str) -> List[Transaction]:
        """
        Extract transactions from page text.

        Lines that do not look like a transaction are dropped silently.

        Args:
            text: Page text, lines separated by line breaks

        Returns:
            Transactions in line order, dates left unnormalized
        """
        lines = self.preprocessor.split_lines(text)

        transactions = []
        for line_num, line in enumerate(lines):
            transaction = self.extract_from_line(line)
            if transaction is None:
                self.logger.debug(f"Skipped line {line_num}: {line[:80]!r}")
                continue
            transactions.append(transaction)

        self.logger.debug(f"Extracted {len(transactions)} transactions from {len(lines)} lines")
        return transactions

    def extract_from_line(self, line: str) -> Optional[Transaction]:
        """Parse one line as DATE DESCRIPTION AMOUNT [... BALANCE], or return None."""
        date_match = DATE_PATTERN.search(line)
        if not date_match:
            return None

        amount_matches = list(AMOUNT_PATTERN.finditer(line))
        if not amount_matches:
            return None

        first_amount = amount_matches[0]
        # The amount has to come after the date
        if first_amount.start() <= date_match.end():
            return None

        description = line[date_match.end():first_amount.start()].strip()
        if not description:
            return None

        amount = self.preprocessor.clean_amount(first_amount.group())
        if amount is None:
            return None

        balance = None
        if len(amount_matches) > 1:
            balance = self.preprocessor.clean_amount(amount_matches[-1].group())

        try:
            return Transaction(
                raw_date=date_match.group(),
                description=description,
                amount=amount,
                balance=balance,
            )
        except ValidationError as e:
            self.logger.debug(f"Rejected line {line[:80]!r}: {e}")
            return None


def parse_transactions(text: str) -> List[Transaction]:
    """Module-level shortcut for TransactionExtractor().extract_from_text."""
    return TransactionExtractor().extract_from_text(text)
