from typing import List

from schema import Table, Transaction

TABLE_NAME_TEMPLATE = "Transaction Table {page}"


def table_id(page_index: int) -> str:
    return f"table-{page_index}"


def group_tables(page_index: int, transactions: List[Transaction], preview: bytes = b"") -> List[Table]:
    """
    Group a page's transactions into selectable regions.

    A page gets a single table holding all of its transactions, or none
    when nothing was found. Statements that print several independent
    sections on one page still end up in that single table.

    Args:
        page_index: 1-based page number
        transactions: Transactions parsed from the page, in line order
        preview: Image of the region (the whole page)

    Returns:
        Zero or one Table
    """
    if not transactions:
        return []

    return [
        Table(
            id=table_id(page_index),
            name=TABLE_NAME_TEMPLATE.format(page=page_index),
            selected=True,
            transactions=list(transactions),
            preview=preview,
        )
    ]
