"""
Exceptions raised by the statement ingestion pipeline.

Everything inherits from StatementError so callers can catch one type.
Page-scoped errors carry the 1-based index of the page that failed.
"""


class StatementError(Exception):
    """Base exception for statement processing errors."""

    def __init__(self, message: str, code: str = None):
        super().__init__(message)
        self.message = message
        self.code = code


class DecodeError(StatementError):
    """The document container could not be opened (corrupt, empty or encrypted)."""

    def __init__(self, message: str, code: str = "DECODE_ERROR"):
        super().__init__(message, code)


class PageError(StatementError):
    """A failure confined to a single page."""

    def __init__(self, page_index: int, message: str, code: str = "PAGE_ERROR"):
        super().__init__(f"Page {page_index}: {message}", code)
        self.page_index = page_index


class PageRenderError(PageError):
    """Rasterizing a page failed."""

    def __init__(self, page_index: int, message: str, code: str = "PAGE_RENDER_ERROR"):
        super().__init__(page_index, message, code)


class PageExtractError(PageError):
    """Reading the text layer of a page failed."""

    def __init__(self, page_index: int, message: str, code: str = "PAGE_EXTRACT_ERROR"):
        super().__init__(page_index, message, code)


class PageParseError(PageError):
    """Parsing or grouping the text of a page failed."""

    def __init__(self, page_index: int, message: str, code: str = "PAGE_PARSE_ERROR"):
        super().__init__(page_index, message, code)
