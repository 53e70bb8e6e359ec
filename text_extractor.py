import logging
from typing import Dict, List, Optional

import config
from exceptions import PageExtractError
from file_loader import PageHandle

logger = logging.getLogger(__name__)


def join_runs(words: List[Dict[str, object]], line_tolerance: float) -> str:
    """
    Concatenate text runs in order with single spaces.

    Unlike a plain space join, a run that starts lower than the previous
    one by more than `line_tolerance` is separated by a line break instead,
    so each visual row of the page comes out as one line of text.
    """
    parts: List[str] = []
    prev_top: Optional[float] = None

    for word in words:
        text = str(word.get("text", ""))
        if not text:
            continue
        top = float(word.get("top", 0.0))
        if prev_top is not None:
            parts.append("\n" if abs(top - prev_top) > line_tolerance else " ")
        parts.append(text)
        prev_top = top

    return "".join(parts)


class TextExtractor:
    """Reads the embedded text layer of a page with pdfplumber. No OCR."""

    def __init__(self, line_tolerance: Optional[float] = None):
        self.line_tolerance = config.LINE_TOLERANCE if line_tolerance is None else line_tolerance
        self.logger = logging.getLogger(self.__class__.__name__)

    def extract(self, page: PageHandle) -> str:
        """
        Return the page text as one string.

        No column or table layout is rebuilt; the transaction parser copes
        with loosely ordered runs.

        Raises:
            PageExtractError: if pdfplumber fails on this page
        """
        try:
            with page.text_layer() as plumber_page:
                words = plumber_page.extract_words(
                    keep_blank_chars=False,
                    x_tolerance=2,
                    y_tolerance=self.line_tolerance,
                ) or []
        except Exception as e:
            raise PageExtractError(page.index, f"Text extraction failed: {str(e)}") from e

        text = join_runs(words, self.line_tolerance)
        if not text.strip():
            self.logger.warning(f"Page {page.index} has no text layer")
        return text
