"""
Ingestion pipeline: bytes -> Document.

Pages are independent, so they are processed on a bounded thread pool.
Each page writes into its own slot of an index-addressed list, and the
document is assembled from those slots in page order; completion order
never leaks into the result. A page that fails to render or extract is
left out and reported alongside the partial document.
"""

import base64
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Callable, Dict, List, Optional, Union

import config
from exceptions import PageError, PageExtractError, PageParseError, PageRenderError
from extractor import TransactionExtractor
from file_loader import DocumentHandle, FileLoader, PageHandle
from grouper import group_tables
from preprocess import DataPreprocessor
from renderer import PageRenderer, RenderedPage
from schema import Document, IngestionResult, Page, PageFailure
from text_extractor import TextExtractor

logger = logging.getLogger(__name__)

PageOutcome = Union[Page, PageFailure, None]

STAGES = (
    (PageRenderError, "render"),
    (PageExtractError, "extract"),
    (PageParseError, "parse"),
)


class StatementPipeline:
    """Loader -> renderer/text extractor -> parser -> grouper, per page."""

    def __init__(
        self,
        loader: Optional[FileLoader] = None,
        renderer: Optional[PageRenderer] = None,
        text_extractor: Optional[TextExtractor] = None,
        extractor: Optional[TransactionExtractor] = None,
        preprocessor: Optional[DataPreprocessor] = None,
        max_workers: Optional[int] = None,
    ):
        self.loader = loader or FileLoader()
        self.renderer = renderer or PageRenderer()
        self.text_extractor = text_extractor or TextExtractor()
        self.preprocessor = preprocessor or DataPreprocessor()
        self.extractor = extractor or TransactionExtractor(self.preprocessor)
        self.max_workers = max(1, config.PDF_MAX_WORKERS if max_workers is None else max_workers)
        self.logger = logging.getLogger(self.__class__.__name__)

    def ingest(
        self,
        content: bytes,
        scale: Optional[float] = None,
        should_continue: Optional[Callable[[], bool]] = None,
    ) -> IngestionResult:
        """
        Ingest a statement PDF.

        Args:
            content: Raw PDF bytes
            scale: Render scale for full page images
            should_continue: Checked before each page starts; returning False
                skips the remaining pages without reporting them as failures.
                It cannot stop a page that is already running, so when
                max_workers >= page count every page has usually started
                before the first False is seen

        Returns:
            IngestionResult with the (possibly partial) document and page failures

        Raises:
            DecodeError: if the document cannot be opened at all
        """
        with self.loader.load_bytes(content) as handle:
            return self.ingest_document(handle, scale, should_continue)

    def ingest_document(
        self,
        handle: DocumentHandle,
        scale: Optional[float] = None,
        should_continue: Optional[Callable[[], bool]] = None,
    ) -> IngestionResult:
        page_count = handle.page_count
        slots: List[PageOutcome] = [None] * page_count

        if self.max_workers == 1 or page_count <= 1:
            for page in handle.pages():
                slots[page.index - 1] = self.process_page(page, scale, should_continue)
        else:
            with ThreadPoolExecutor(max_workers=min(self.max_workers, page_count)) as executor:
                futures = {
                    executor.submit(self.process_page, page, scale, should_continue): page.index
                    for page in handle.pages()
                }
                for fut in as_completed(futures):
                    slots[futures[fut] - 1] = fut.result()

        return self.merge(slots)

    def process_page(
        self,
        page: PageHandle,
        scale: Optional[float] = None,
        should_continue: Optional[Callable[[], bool]] = None,
    ) -> PageOutcome:
        """Render, extract and parse one page. Page-scoped errors become a PageFailure."""
        if should_continue is not None and not should_continue():
            self.logger.info(f"Skipping page {page.index}: ingestion stopped")
            return None

        try:
            rendered = self.renderer.render(page, scale)
            text = self.text_extractor.extract(page)
            return self.build_page(page.index, rendered, text)
        except PageError as e:
            stage = failure_stage(e)
            self.logger.warning(f"Dropping page after {stage} failure. {e.message}")
            return PageFailure(page_index=page.index, stage=stage, message=e.message, code=e.code)

    def build_page(self, index: int, rendered: RenderedPage, text: str) -> Page:
        """Parse and group one page's text into a Page."""
        try:
            transactions = self.extractor.extract_from_text(text)
            for transaction in transactions:
                transaction.page_index = index

            page = Page(
                index=index,
                image=rendered.image,
                thumbnail=rendered.thumbnail,
                width=rendered.width,
                height=rendered.height,
                text=text,
                transactions=transactions,
                tables=group_tables(index, transactions, rendered.image),
            )
        except Exception as e:
            raise PageParseError(index, f"Parsing failed: {str(e)}") from e

        self.logger.info(f"Page {index}: {len(text)} chars, {len(transactions)} transactions")
        return page

    def merge(self, slots: List[PageOutcome]) -> IngestionResult:
        """Assemble slots in page order, assigning ids and normalized dates."""
        pages = [slot for slot in slots if isinstance(slot, Page)]
        failures = [slot for slot in slots if isinstance(slot, PageFailure)]

        counter = 0
        for page in pages:
            for transaction in page.transactions:
                transaction.id = f"trans_{counter}"
                transaction.date = self.preprocessor.normalize_date(transaction.raw_date)
                counter += 1

        document = Document(pages=pages)
        self.logger.info(
            f"Ingested {document.page_count} pages, {counter} transactions, {len(failures)} failed pages"
        )
        return IngestionResult(document=document, failures=failures)


def failure_stage(error: PageError) -> str:
    for error_type, stage in STAGES:
        if isinstance(error, error_type):
            return stage
    return "page"


def to_data_url(image: bytes, image_format: str = config.IMAGE_FORMAT) -> str:
    return f"data:image/{image_format};base64,{base64.b64encode(image).decode('ascii')}"


def ingestion_report(document: Document) -> Dict[str, Any]:
    """
    Per-page overview handed to the preview step.

    dateRange holds the raw dates of the first and last transaction in
    extraction order, which is not necessarily chronological.
    """
    transactions = document.transactions
    return {
        "pageCount": document.page_count,
        "pages": [
            {
                "index": page.index,
                "textLength": len(page.text),
                "transactionCount": len(page.transactions),
                "thumbnail": to_data_url(page.thumbnail),
                "fullImage": to_data_url(page.image),
            }
            for page in document.pages
        ],
        "totalTransactions": len(transactions),
        "dateRange": {
            "start": transactions[0].raw_date if transactions else None,
            "end": transactions[-1].raw_date if transactions else None,
        },
    }
