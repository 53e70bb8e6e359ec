from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from pydantic.alias_generators import to_camel


class Category(str, Enum):
    """Fixed set of spending/income labels."""
    SALARY = "Salary"
    GROCERIES = "Groceries"
    RENT = "Rent"
    UTILITIES = "Utilities"
    TRANSPORTATION = "Transportation"
    ENTERTAINMENT = "Entertainment"
    DINING = "Dining"
    SHOPPING = "Shopping"
    HEALTHCARE = "Healthcare"
    EDUCATION = "Education"
    TRAVEL = "Travel"
    OTHER = "Other"


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


def transaction_type_for(amount: Decimal) -> TransactionType:
    """Zero counts as income."""
    return TransactionType.INCOME if amount >= 0 else TransactionType.EXPENSE


class Transaction(BaseModel):
    """Single transaction recovered from a statement line."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field("", description="Stable id assigned in document order")
    raw_date: str = Field(..., description="Date text exactly as matched on the line")
    date: Optional[str] = Field(None, description="YYYY-MM-DD, or the raw text when it could not be parsed")
    description: str
    amount: Decimal
    balance: Optional[Decimal] = None
    category: Optional[Category] = None
    page_index: Optional[int] = None

    @field_validator('description')
    @classmethod
    def validate_description(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError('Description must not be empty')
        return v

    @field_validator('amount', 'balance')
    @classmethod
    def validate_finite(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is not None and not v.is_finite():
            raise ValueError('Amounts must be finite')
        return v

    @computed_field(alias="type")
    @property
    def transaction_type(self) -> TransactionType:
        return transaction_type_for(self.amount)

    @property
    def sort_date(self) -> str:
        return self.date if self.date is not None else self.raw_date


class Table(BaseModel):
    """Selectable region of transactions detected on one page."""
    id: str
    name: str
    selected: bool = True
    transactions: List[Transaction] = Field(default_factory=list)
    preview: bytes = Field(b"", repr=False)


class Page(BaseModel):
    index: int = Field(..., ge=1, description="1-based page number")
    image: bytes = Field(b"", repr=False)
    thumbnail: bytes = Field(b"", repr=False)
    width: float = 0.0
    height: float = 0.0
    text: str = ""
    transactions: List[Transaction] = Field(default_factory=list)
    tables: List[Table] = Field(default_factory=list)


class Document(BaseModel):
    pages: List[Page] = Field(default_factory=list)

    @field_validator('pages')
    @classmethod
    def validate_page_order(cls, v: List[Page]) -> List[Page]:
        """Page indices must be strictly increasing."""
        for previous, current in zip(v, v[1:]):
            if current.index <= previous.index:
                raise ValueError(f'Page {current.index} follows page {previous.index}')
        return v

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def transactions(self) -> List[Transaction]:
        return [t for page in self.pages for t in page.transactions]

    @property
    def tables(self) -> List[Table]:
        return [table for page in self.pages for table in page.tables]


class PageFailure(BaseModel):
    """A page that was dropped from the document, and why."""
    page_index: int
    stage: str
    message: str
    code: Optional[str] = None


class IngestionResult(BaseModel):
    document: Document
    failures: List[PageFailure] = Field(default_factory=list)

    @property
    def failed_pages(self) -> List[int]:
        return [f.page_index for f in self.failures]

    @property
    def is_complete(self) -> bool:
        return not self.failures


class Summary(BaseModel):
    """Aggregate figures over a transaction set."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_income: Decimal = Decimal("0")
    total_expense: Decimal = Decimal("0")
    balance: Decimal = Decimal("0")
    # Signed: expense buckets are negative
    category_summary: Dict[Category, Decimal] = Field(default_factory=dict)
