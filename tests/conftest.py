"""
Shared pytest fixtures.

Statement PDFs are synthesized in memory with PyMuPDF so the tests need
no files on disk.
"""

from decimal import Decimal
from typing import List, Optional

import fitz
import pytest

from schema import Category, Transaction


def build_pdf(pages: List[List[str]], fontsize: float = 11) -> bytes:
    """Create a PDF with one page per entry, each line drawn on its own row."""
    doc = fitz.open()
    for lines in pages:
        page = doc.new_page()
        if lines:
            page.insert_text((50, 72), lines, fontsize=fontsize)
    content = doc.tobytes()
    doc.close()
    return content


def make_transaction(description: str, amount, raw_date: str = "2023-05-01",
                     category: Optional[Category] = None, transaction_id: str = "") -> Transaction:
    return Transaction(
        id=transaction_id,
        raw_date=raw_date,
        date=raw_date,
        description=description,
        amount=Decimal(str(amount)),
        category=category,
    )


STATEMENT_PAGES = [
    [
        "ACME BANK - Monthly Statement",
        "01/02/2023 Coffee Shop -$4.50",
        "2023-05-01 Payroll Deposit $3,500.00 $10,200.00",
    ],
    [
        "Page 2",
        "05/03/2023 City Electric Company -120.45 9,000.00",
    ],
    [
        "Page 3",
        "05/18/2023 Restaurant Dinner -78.90",
        "05/20/2023 Bonus Payment 500.00",
    ],
]


@pytest.fixture
def statement_pdf() -> bytes:
    """Three-page statement with transactions on every page."""
    return build_pdf(STATEMENT_PAGES)


@pytest.fixture
def pdf_factory():
    return build_pdf


@pytest.fixture
def sample_transactions() -> List[Transaction]:
    return [
        make_transaction("Payroll Deposit", "3500.00", "2023-05-01", transaction_id="trans_0"),
        make_transaction("Supermarket", "-120.45", "2023-05-02", transaction_id="trans_1"),
        make_transaction("Monthly Rent", "-1200.00", "2023-05-03", transaction_id="trans_2"),
        make_transaction("Electric Bill", "-85.20", "2023-05-05", transaction_id="trans_3"),
        make_transaction("Movie Theater", "-32.50", "2023-05-10", transaction_id="trans_4"),
        make_transaction("Bonus Payment", "500.00", "2023-05-15", transaction_id="trans_5"),
        make_transaction("Restaurant Dinner", "-78.90", "2023-05-18", transaction_id="trans_6"),
        make_transaction("Fee Reversal", "0.00", "2023-05-20", transaction_id="trans_7"),
    ]
