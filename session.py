import logging
from typing import Any, Dict, List, Optional, Union

from aggregator import summarize
from categorizer import TransactionCategorizer
from export import ExportBundle, ExportSettings, prepare_export
from pipeline import StatementPipeline
from schema import Category, Document, IngestionResult, PageFailure, Summary, Table, Transaction
from transaction_view import SortSpec, SortState, build_view

logger = logging.getLogger(__name__)


class StatementSession:
    """
    Interactive state over one ingested document.

    Holds what the user changes after ingestion: which tables are selected,
    category overrides, and the search/filter/sort of the transaction list.
    The pipeline itself stays stateless; loading a new document means
    starting a new session.
    """

    def __init__(self, result: IngestionResult, categorizer: Optional[TransactionCategorizer] = None):
        self.document: Document = result.document
        self.failures: List[PageFailure] = list(result.failures)
        self.categorizer = categorizer or TransactionCategorizer()
        self.sort_state = SortState()
        self.search = ""
        self.type_filter = 'all'
        self.logger = logging.getLogger(self.__class__.__name__)

        self._tables: Dict[str, Table] = {table.id: table for table in self.document.tables}
        self._transactions: Dict[str, Transaction] = {t.id: t for t in self.document.transactions}
        self.categorizer.categorize_all(self.document.transactions)

    @classmethod
    def from_bytes(cls, content: bytes, pipeline: Optional[StatementPipeline] = None) -> "StatementSession":
        return cls((pipeline or StatementPipeline()).ingest(content))

    @property
    def tables(self) -> List[Table]:
        return list(self._tables.values())

    def select_table(self, table_id: str, selected: bool) -> Table:
        if table_id not in self._tables:
            raise KeyError(f"Unknown table: {table_id}")
        table = self._tables[table_id]
        table.selected = selected
        self.logger.debug(f"Table {table_id} selected={selected}")
        return table

    def selected_transactions(self) -> List[Transaction]:
        """Transactions of every selected table, in page order."""
        return [t for table in self._tables.values() if table.selected for t in table.transactions]

    def set_category(self, transaction_id: str, category: Union[Category, str]) -> Transaction:
        """Reassign a category. The income/expense type is unaffected."""
        if transaction_id not in self._transactions:
            raise KeyError(f"Unknown transaction: {transaction_id}")
        transaction = self._transactions[transaction_id]
        transaction.category = Category(category)
        return transaction

    def summary(self) -> Summary:
        return summarize(self.selected_transactions())

    def request_sort(self, key: str) -> SortSpec:
        return self.sort_state.request(key)

    def view(self) -> List[Transaction]:
        """Selected transactions after the current search, type filter and sort."""
        return build_view(self.selected_transactions(), self.search, self.type_filter, self.sort_state.spec)

    def categorization_result(self) -> Dict[str, Any]:
        return {
            "transactions": [
                t.model_dump(mode="json", by_alias=True, include={"id", "date", "description", "amount", "category", "transaction_type"})
                for t in self.selected_transactions()
            ],
            "summary": self.summary().model_dump(mode="json", by_alias=True),
        }

    def export(self, settings: Optional[ExportSettings] = None) -> ExportBundle:
        transactions = self.selected_transactions()
        return prepare_export(transactions, settings, summarize(transactions))
