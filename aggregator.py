from decimal import Decimal
from typing import Dict, Iterable

from categorizer import categorize
from schema import Category, Summary, Transaction


def effective_category(transaction: Transaction) -> Category:
    """User- or rule-assigned category, falling back to the rules for untagged transactions."""
    if transaction.category is not None:
        return transaction.category
    category, _ = categorize(transaction.description, transaction.amount)
    return category


def summarize(transactions: Iterable[Transaction]) -> Summary:
    """
    Aggregate income, expense and per-category totals.

    Zero amounts land on the expense side here but contribute nothing.
    Category totals keep the sign of each amount, so expense buckets come
    out negative and all buckets together add up to the balance.
    """
    total_income = Decimal("0")
    total_expense = Decimal("0")
    category_summary: Dict[Category, Decimal] = {}

    for transaction in transactions:
        amount = transaction.amount
        if amount > 0:
            total_income += amount
        else:
            total_expense += abs(amount)

        category = effective_category(transaction)
        category_summary[category] = category_summary.get(category, Decimal("0")) + amount

    return Summary(
        total_income=total_income,
        total_expense=total_expense,
        balance=total_income - total_expense,
        category_summary=category_summary,
    )
