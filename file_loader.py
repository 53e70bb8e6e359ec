import os
import logging
import threading
from contextlib import contextmanager
from io import BytesIO
from typing import Iterator

import fitz  # PyMuPDF
import pdfplumber

from exceptions import DecodeError

logger = logging.getLogger(__name__)


class PageHandle:
    """One page of an open document. Indices are 1-based."""

    def __init__(self, document: "DocumentHandle", index: int):
        self.document = document
        self.index = index

    @contextmanager
    def raster(self) -> Iterator["fitz.Page"]:
        """PyMuPDF page, held under the document's render lock."""
        with self.document.render_lock:
            yield self.document.fitz_document.load_page(self.index - 1)

    @contextmanager
    def text_layer(self) -> Iterator["pdfplumber.page.Page"]:
        """pdfplumber page, held under the document's text lock."""
        with self.document.text_lock:
            yield self.document.plumber_document.pages[self.index - 1]

    def __repr__(self) -> str:
        return f"PageHandle(index={self.index})"


class DocumentHandle:
    """
    Paged view over an opened PDF.

    Keeps a PyMuPDF document for rasterizing and a pdfplumber document for
    the text layer. Neither library is safe to call from several threads at
    once, so each one gets its own lock; a render and a text read can still
    overlap.
    """

    def __init__(self, content: bytes, fitz_document: "fitz.Document", plumber_document: "pdfplumber.PDF"):
        self.content = content
        self.fitz_document = fitz_document
        self.plumber_document = plumber_document
        self.render_lock = threading.Lock()
        self.text_lock = threading.Lock()

    @property
    def page_count(self) -> int:
        return self.fitz_document.page_count

    def page(self, index: int) -> PageHandle:
        if not 1 <= index <= self.page_count:
            raise IndexError(f"Page {index} out of range 1..{self.page_count}")
        return PageHandle(self, index)

    def pages(self) -> Iterator[PageHandle]:
        for index in range(1, self.page_count + 1):
            yield PageHandle(self, index)

    def close(self) -> None:
        self.plumber_document.close()
        self.fitz_document.close()

    def __enter__(self) -> "DocumentHandle":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class FileLoader:
    """Opens statement PDFs."""

    SUPPORTED_EXTENSIONS = {'.pdf'}

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    def load_file(self, file_path: str) -> DocumentHandle:
        """
        Read a PDF from disk and open it.

        Args:
            file_path: Path to the statement

        Returns:
            DocumentHandle over the file's bytes
        """
        if not os.path.exists(file_path):
            raise FileNotFoundError(f"File not found: {file_path}")

        file_ext = os.path.splitext(file_path)[1].lower()
        if file_ext not in self.SUPPORTED_EXTENSIONS:
            raise ValueError(f"Unsupported file type: {file_ext}")

        self.logger.info(f"Loading {file_ext} file: {file_path}")
        with open(file_path, 'rb') as f:
            return self.load_bytes(f.read())

    def load_bytes(self, content: bytes) -> DocumentHandle:
        """
        Open an in-memory PDF.

        Size and mime type are assumed to be checked by the caller.

        Args:
            content: Raw PDF bytes

        Returns:
            DocumentHandle exposing page_count and page(index)

        Raises:
            DecodeError: if the container cannot be parsed or is encrypted
        """
        if not content:
            raise DecodeError("Document is empty")

        fitz_document = self._open_fitz(content)
        try:
            plumber_document = pdfplumber.open(BytesIO(content))
        except Exception as e:
            fitz_document.close()
            raise DecodeError(f"Could not read text layer: {str(e)}") from e

        handle = DocumentHandle(content, fitz_document, plumber_document)
        self.logger.info(f"Opened document with {handle.page_count} pages ({len(content)} bytes)")
        return handle

    def _open_fitz(self, content: bytes) -> "fitz.Document":
        try:
            document = fitz.open(stream=content, filetype="pdf")
        except Exception as e:
            raise DecodeError(f"Could not open document: {str(e)}") from e

        if document.needs_pass:
            document.close()
            raise DecodeError("Document is encrypted", code="ENCRYPTED")

        if document.page_count == 0:
            document.close()
            raise DecodeError("Document has no pages")

        return document
