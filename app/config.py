# app/config.py
import os
from typing import List, Optional

# Upstream product/auth API (dummyjson by default)
UPSTREAM_URL = os.getenv("UPSTREAM_URL", "https://dummyjson.com").rstrip("/")


def _parse_timeout(raw: Optional[str]) -> Optional[float]:
    # empty / unset -> no timeout at all, a hung upstream hangs the request
    if raw is None or not raw.strip():
        return None
    try:
        return float(raw)
    except ValueError:
        raise ValueError(
            f"UPSTREAM_TIMEOUT must be a number of seconds or empty, got {raw!r}"
        ) from None


def _parse_flag(raw: Optional[str]) -> bool:
    return (raw or "").strip().lower() in {"1", "true", "yes", "on"}


UPSTREAM_TIMEOUT: Optional[float] = _parse_timeout(os.getenv("UPSTREAM_TIMEOUT"))

# Return the narrow Product shape from /products instead of full upstream records
PRODUCT_PROJECTION = _parse_flag(os.getenv("PRODUCT_PROJECTION"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

CORS_ORIGINS: List[str] = [
    o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()
]
