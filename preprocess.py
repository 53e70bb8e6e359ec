import re
import logging
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from dateutil import parser
from dateutil.parser import ParserError

import config

logger = logging.getLogger(__name__)

# D/M/Y with 2-4 digit year, or Y/M/D with a leading 4-digit year
DATE_PATTERN = re.compile(
    r'\d{1,2}[/-]\d{1,2}[/-]\d{2,4}'
    r'|\d{4}[/-]\d{1,2}[/-]\d{1,2}'
)

CURRENCY_SYMBOLS = '$€£¥₹'

# Signed, optional currency symbol, optional thousands separators, exactly two decimals
AMOUNT_PATTERN = re.compile(
    rf'[-+]?[{CURRENCY_SYMBOLS}]?(?:\d{{1,3}}(?:,\d{{3}})+|\d+)\.\d{{2}}(?!\d)'
)


class DataPreprocessor:
    """Line splitting and date/amount normalization for statement text."""

    def __init__(self, dayfirst: Optional[bool] = None):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.dayfirst = config.DATE_DAYFIRST if dayfirst is None else dayfirst

    def split_lines(self, text: str) -> List[str]:
        """Split text on line breaks, dropping blank lines."""
        return [line for line in text.splitlines() if line.strip()]

    def normalize_date(self, date_str: str) -> str:
        """
        Normalize a matched date string to YYYY-MM-DD.

        Separators are unified before parsing. Month-first unless
        configured otherwise. Dates whose fields only parse in the other
        order (e.g. "31/12/2023" when month-first) are kept raw rather
        than silently swapped.

        Args:
            date_str: Raw date text, e.g. "01/02/2023" or "2023-05-01"

        Returns:
            ISO date string, or date_str unchanged when it cannot be parsed
        """
        if not date_str:
            return date_str

        unified = re.sub(r'[/-]', '/', date_str.strip())
        # Year-leading dates are always Y/M/D
        year_first = len(unified.split('/')[0]) == 4
        try:
            parsed_date = parser.parse(unified, dayfirst=self.dayfirst and not year_first)
        except (ParserError, ValueError, OverflowError):
            self.logger.debug(f"Could not normalize date: {date_str}")
            return date_str

        if not self._fields_in_order(unified, parsed_date.month, parsed_date.day):
            self.logger.debug(f"Date {date_str} does not match the configured field order")
            return date_str

        return parsed_date.strftime('%Y-%m-%d')

    def _fields_in_order(self, unified: str, month: int, day: int) -> bool:
        parts = unified.split('/')
        if len(parts) != 3 or not all(part.isdigit() for part in parts):
            return True
        if len(parts[0]) == 4:
            expected = (parts[1], parts[2])
        elif self.dayfirst:
            expected = (parts[1], parts[0])
        else:
            expected = (parts[0], parts[1])
        return (int(expected[0]), int(expected[1])) == (month, day)

    def clean_amount(self, amount_str: str) -> Optional[Decimal]:
        """
        Convert an amount token to Decimal.

        Args:
            amount_str: Token such as "-$1,234.56"

        Returns:
            Decimal value, or None when the stripped token is not numeric
        """
        cleaned = re.sub(rf'[{CURRENCY_SYMBOLS},\s]', '', amount_str)
        try:
            value = Decimal(cleaned)
        except InvalidOperation:
            self.logger.debug(f"Could not parse amount: {amount_str}")
            return None

        return value if value.is_finite() else None
