import logging
from decimal import Decimal
from typing import Iterable, List, NamedTuple, Tuple, Union

from schema import Category, Transaction, TransactionType, transaction_type_for

logger = logging.getLogger(__name__)


class CategoryRule(NamedTuple):
    """Assigns `category` when the description contains any of `keywords`."""
    keywords: Tuple[str, ...]
    category: Category

    def matches(self, description: str) -> bool:
        desc = description.lower()
        return any(keyword in desc for keyword in self.keywords)


INCOME_RULES: Tuple[CategoryRule, ...] = (
    CategoryRule(('payroll', 'salary', 'deposit'), Category.SALARY),
)

# Evaluated in order, first match wins. "gas" is claimed by Utilities
# before the "gas station" rule is ever reached.
EXPENSE_RULES: Tuple[CategoryRule, ...] = (
    CategoryRule(('grocery', 'supermarket', 'food'), Category.GROCERIES),
    CategoryRule(('rent', 'mortgage'), Category.RENT),
    CategoryRule(('utility', 'electric', 'gas', 'water'), Category.UTILITIES),
    CategoryRule(('gas station', 'fuel', 'transport'), Category.TRANSPORTATION),
    CategoryRule(('restaurant', 'dining', 'cafe'), Category.DINING),
    CategoryRule(('movie', 'theater', 'entertainment'), Category.ENTERTAINMENT),
    CategoryRule(('shop', 'store', 'mall'), Category.SHOPPING),
    CategoryRule(('hospital', 'doctor', 'medical'), Category.HEALTHCARE),
    CategoryRule(('school', 'university', 'education'), Category.EDUCATION),
    CategoryRule(('hotel', 'flight', 'travel'), Category.TRAVEL),
)


def first_match(rules: Iterable[CategoryRule], description: str) -> Category:
    for rule in rules:
        if rule.matches(description):
            return rule.category
    return Category.OTHER


def categorize(description: str, amount: Union[Decimal, int, float]) -> Tuple[Category, TransactionType]:
    """
    Classify a transaction from its description and signed amount.

    Args:
        description: Transaction description (case is ignored)
        amount: Signed amount; zero is income

    Returns:
        Tuple of (category, transaction type)
    """
    amount = Decimal(str(amount))
    transaction_type = transaction_type_for(amount)

    if amount > 0:
        return first_match(INCOME_RULES, description), transaction_type

    return first_match(EXPENSE_RULES, description), transaction_type


class TransactionCategorizer:
    """Tags transaction sets using the keyword rules above."""

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    def categorize_transaction(self, transaction: Transaction) -> Category:
        category, _ = categorize(transaction.description, transaction.amount)
        return category

    def categorize_all(self, transactions: List[Transaction], overwrite: bool = False) -> List[Transaction]:
        """
        Set `category` on each transaction in place.

        Args:
            transactions: Transactions to tag
            overwrite: Also replace categories that are already set

        Returns:
            The same list, for chaining
        """
        tagged = 0
        for transaction in transactions:
            if transaction.category is not None and not overwrite:
                continue
            transaction.category = self.categorize_transaction(transaction)
            tagged += 1

        self.logger.info(f"Categorized {tagged} of {len(transactions)} transactions")
        return transactions
