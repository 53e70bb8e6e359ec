import logging
from dataclasses import dataclass
from typing import List, Literal, Optional

import pandas as pd
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from aggregator import effective_category, summarize
from schema import Summary, Transaction

logger = logging.getLogger(__name__)


class ExportSettings(BaseModel):
    """Options chosen on the export form; the spreadsheet writer consumes them."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    template: Literal['standard', 'financial', 'accounting', 'tax'] = 'standard'
    include_categories: bool = True
    include_summary: bool = True
    file_format: Literal['xlsx', 'csv', 'xls'] = 'xlsx'


@dataclass
class ExportBundle:
    """Everything an external writer needs; nothing here is written to disk."""
    transactions: pd.DataFrame
    summary: Optional[pd.DataFrame]
    settings: ExportSettings


def transactions_frame(transactions: List[Transaction], include_categories: bool = True) -> pd.DataFrame:
    columns = ['Date', 'Description', 'Amount', 'Balance', 'Type']
    if include_categories:
        columns.append('Category')

    rows = []
    for t in transactions:
        row = {
            'Date': t.sort_date,
            'Description': t.description,
            'Amount': float(t.amount),
            'Balance': float(t.balance) if t.balance is not None else None,
            'Type': t.transaction_type.value,
        }
        if include_categories:
            row['Category'] = effective_category(t).value
        rows.append(row)

    return pd.DataFrame(rows, columns=columns)


def summary_frame(summary: Summary, include_categories: bool = True) -> pd.DataFrame:
    rows = [
        ('Total Income', float(summary.total_income)),
        ('Total Expense', float(summary.total_expense)),
        ('Balance', float(summary.balance)),
    ]
    if include_categories:
        rows.extend(
            (f"Category: {category.value}", float(amount))
            for category, amount in summary.category_summary.items()
        )
    return pd.DataFrame(rows, columns=['Metric', 'Amount'])


def prepare_export(transactions: List[Transaction], settings: Optional[ExportSettings] = None,
                   summary: Optional[Summary] = None) -> ExportBundle:
    """
    Shape categorized transactions for the spreadsheet writer.

    Args:
        transactions: Transactions to export, in display order
        settings: Export options (defaults when omitted)
        summary: Precomputed summary; computed from `transactions` if missing

    Returns:
        ExportBundle with a transactions frame and, if requested, a summary frame
    """
    settings = settings or ExportSettings()

    frame = transactions_frame(transactions, settings.include_categories)
    summary_df = None
    if settings.include_summary:
        summary_df = summary_frame(summary or summarize(transactions), settings.include_categories)

    logger.info(
        f"Prepared {len(frame)} rows for {settings.file_format} export "
        f"(template={settings.template}, summary={settings.include_summary})"
    )
    return ExportBundle(transactions=frame, summary=summary_df, settings=settings)
