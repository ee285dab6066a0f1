# app/shop.py
import locale
import logging
from typing import Any, Dict, List, Tuple

from fastapi import APIRouter, Depends
from pydantic import ValidationError

from . import config
from .errors import UpstreamError
from .schemas import ErrorOut, ProductTitle, to_product
from .upstream import UpstreamClient, get_upstream

logger = logging.getLogger(__name__)

router = APIRouter(tags=["products"])


def title_sort_key(title: str) -> Tuple[str, str]:
    # case-insensitive first, like String.localeCompare, then case as tie-break;
    # strxfrm cannot take NUL characters
    title = title.replace("\x00", "")
    return locale.strxfrm(title.casefold()), locale.strxfrm(title)


def sort_products_ascending(products: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Sort upstream records by title; sorted() is stable so equal titles keep upstream order."""
    try:
        titles = [ProductTitle.model_validate(p).title for p in products]
    except ValidationError as e:
        raise UpstreamError(f"malformed product record: {e}") from e
    order = sorted(range(len(products)), key=lambda i: title_sort_key(titles[i]))
    return [products[i] for i in order]


@router.get("/products", responses={500: {"model": ErrorOut}})
async def list_products(upstream: UpstreamClient = Depends(get_upstream)):
    try:
        products = sort_products_ascending(await upstream.fetch_products())
        if config.PRODUCT_PROJECTION:
            try:
                return [to_product(p) for p in products]
            except ValidationError as e:
                raise UpstreamError(f"product record does not fit projection: {e}") from e
    except UpstreamError as e:
        logger.warning("Failed to fetch products: %s", e.detail)
        raise

    # full upstream records are returned on purpose, see DESIGN.md
    return products
