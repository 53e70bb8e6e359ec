import os
from typing import Optional


def getenv_str(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    return v if v is not None else default


def getenv_int(name: str, default: int) -> int:
    v = os.getenv(name)
    try:
        return int(v) if v is not None else default
    except ValueError:
        return default


def getenv_float(name: str, default: float) -> float:
    v = os.getenv(name)
    try:
        return float(v) if v is not None else default
    except ValueError:
        return default


def getenv_bool(name: str, default: bool) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    return v.strip().lower() in {"1", "true", "yes", "on"}


# Rendering
RENDER_SCALE = getenv_float("BSX_RENDER_SCALE", 1.5)
THUMBNAIL_SIZE = getenv_int("BSX_THUMBNAIL_SIZE", 150)
IMAGE_FORMAT = "png"

# Parallelism
PDF_MAX_WORKERS = max(1, getenv_int("BSX_PDF_MAX_WORKERS", os.cpu_count() or 4))

# Text extraction: vertical distance (points) at which two words sit on different lines
LINE_TOLERANCE = getenv_float("BSX_LINE_TOLERANCE", 3.0)

# Date normalization
DATE_DAYFIRST = getenv_bool("BSX_DATE_DAYFIRST", False)

LOG_LEVEL = getenv_str("BSX_LOG_LEVEL", "INFO")
