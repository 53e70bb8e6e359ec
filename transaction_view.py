from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional

from aggregator import effective_category
from schema import Transaction

TYPE_FILTERS = ('all', 'income', 'expense')

ASCENDING = 'asc'
DESCENDING = 'desc'

SORT_KEYS: Dict[str, Callable[[Transaction], Any]] = {
    'date': lambda t: t.sort_date,
    'description': lambda t: t.description,
    'amount': lambda t: t.amount,
    'category': lambda t: effective_category(t).value,
    'type': lambda t: t.transaction_type.value,
}


@dataclass(frozen=True)
class SortSpec:
    key: str
    direction: str = ASCENDING


class SortState:
    """Remembers the active sort column the way a clickable table header does."""

    def __init__(self):
        self.spec: Optional[SortSpec] = None

    def request(self, key: str) -> SortSpec:
        """Same key flips the direction; a new key starts ascending."""
        if key not in SORT_KEYS:
            raise ValueError(f"Unknown sort key: {key}")

        direction = ASCENDING
        if self.spec is not None and self.spec.key == key and self.spec.direction == ASCENDING:
            direction = DESCENDING

        self.spec = SortSpec(key, direction)
        return self.spec

    def reset(self) -> None:
        self.spec = None


def matches_search(transaction: Transaction, search: str) -> bool:
    if not search:
        return True
    needle = search.lower()
    return (needle in transaction.description.lower()
            or needle in effective_category(transaction).value.lower())


def filter_transactions(transactions: Iterable[Transaction], search: str = "",
                        type_filter: str = 'all') -> List[Transaction]:
    """
    Keep transactions whose description or category contains `search`
    (case-insensitive) and whose type matches `type_filter`.
    """
    if type_filter not in TYPE_FILTERS:
        raise ValueError(f"Unknown type filter: {type_filter}")

    return [
        t for t in transactions
        if matches_search(t, search)
        and (type_filter == 'all' or t.transaction_type.value == type_filter)
    ]


def sort_transactions(transactions: Iterable[Transaction], spec: Optional[SortSpec]) -> List[Transaction]:
    """Stable sort on the requested key; equal keys keep their incoming order in either direction."""
    transactions = list(transactions)
    if spec is None:
        return transactions

    if spec.key not in SORT_KEYS:
        raise ValueError(f"Unknown sort key: {spec.key}")
    if spec.direction not in (ASCENDING, DESCENDING):
        raise ValueError(f"Unknown sort direction: {spec.direction}")

    return sorted(transactions, key=SORT_KEYS[spec.key], reverse=spec.direction == DESCENDING)


def build_view(transactions: Iterable[Transaction], search: str = "", type_filter: str = 'all',
               sort: Optional[SortSpec] = None) -> List[Transaction]:
    return sort_transactions(filter_transactions(transactions, search, type_filter), sort)
