# app/cart.py
import logging
from typing import Dict, FrozenSet, Set

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError

from .auth import get_current_user_id
from .errors import DuplicateItem, InvalidFormat
from .schemas import CartMessage, CartPayload, ErrorOut

logger = logging.getLogger(__name__)

router = APIRouter(tags=["cart"])


class CartStore:
    """In-memory carts: user id -> set of product ids.

    Lives as long as the application instance that owns it, nothing is
    persisted or shared between processes.
    """

    def __init__(self):
        self._carts: Dict[int, Set[int]] = {}

    def add(self, user_id: int, product_id: int) -> None:
        # no await between the check and the insert
        cart = self._carts.get(user_id)
        if cart is not None and product_id in cart:
            raise DuplicateItem()
        if cart is None:
            cart = self._carts[user_id] = set()
        cart.add(product_id)

    def items(self, user_id: int) -> FrozenSet[int]:
        return frozenset(self._carts.get(user_id, ()))

    def __contains__(self, user_id: int) -> bool:
        return user_id in self._carts

    def __len__(self) -> int:
        return len(self._carts)


def get_cart_store(request: Request) -> CartStore:
    return request.app.state.cart_store


async def read_cart_payload(request: Request) -> CartPayload:
    try:
        body = await request.json()
        return CartPayload.model_validate(body)
    except (ValueError, ValidationError) as e:
        raise InvalidFormat() from e


# 🛒 Добавление в корзину
@router.post(
    "/cart",
    response_model=CartMessage,
    responses={code: {"model": ErrorOut} for code in (400, 401, 403)},
)
async def add_to_cart(
    request: Request,
    user_id: int = Depends(get_current_user_id),
    store: CartStore = Depends(get_cart_store),
):
    payload = await read_cart_payload(request)
    store.add(user_id, payload.productId)
    logger.info("User %s added product %s to cart", user_id, payload.productId)
    return CartMessage(message="Product added to cart successfully")
