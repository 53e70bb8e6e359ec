import logging
from dataclasses import dataclass
from typing import Optional

import fitz  # PyMuPDF

import config
from exceptions import PageRenderError
from file_loader import PageHandle

logger = logging.getLogger(__name__)


@dataclass
class RenderedPage:
    image: bytes
    thumbnail: bytes
    width: float   # page size at scale 1
    height: float


def thumbnail_scale(width: float, height: float, size: int) -> float:
    """Scale that brings the longer side of a width x height page to `size`."""
    return size / max(width, height)


class PageRenderer:
    """Rasterizes pages to PNG with PyMuPDF."""

    def __init__(self, scale: Optional[float] = None, thumbnail_size: Optional[int] = None):
        self.scale = config.RENDER_SCALE if scale is None else scale
        self.thumbnail_size = config.THUMBNAIL_SIZE if thumbnail_size is None else thumbnail_size
        self.logger = logging.getLogger(self.__class__.__name__)

    def render(self, page: PageHandle, scale: Optional[float] = None) -> RenderedPage:
        """
        Render a full-size image and a thumbnail of one page.

        Args:
            page: Page to render
            scale: Zoom factor for the full image (defaults to the renderer's)

        Returns:
            RenderedPage with PNG bytes for both images

        Raises:
            PageRenderError: if PyMuPDF fails on this page
        """
        scale = self.scale if scale is None else scale
        try:
            with page.raster() as fitz_page:
                rect = fitz_page.rect
                if rect.width <= 0 or rect.height <= 0:
                    raise PageRenderError(page.index, "Page has no area")

                image = self._to_png(fitz_page, scale)
                thumbnail = self._to_png(fitz_page, thumbnail_scale(rect.width, rect.height, self.thumbnail_size))
                width, height = rect.width, rect.height
        except PageRenderError:
            raise
        except Exception as e:
            raise PageRenderError(page.index, f"Render failed: {str(e)}") from e

        self.logger.debug(f"Rendered page {page.index} at {scale}x ({len(image)} bytes)")
        return RenderedPage(image=image, thumbnail=thumbnail, width=width, height=height)

    def _to_png(self, fitz_page: "fitz.Page", scale: float) -> bytes:
        pix = fitz_page.get_pixmap(matrix=fitz.Matrix(scale, scale))
        return pix.tobytes(config.IMAGE_FORMAT)
