# app/schemas.py
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, StrictInt, field_validator


# 🛍️ Товар (upstream): only the title matters for sorting, other fields pass through untouched
class ProductTitle(BaseModel):
    title: str


# narrow public projection of an upstream product record
class Product(BaseModel):
    id: Optional[int] = None
    title: str
    description: Optional[str] = None
    price: Optional[float] = None
    thumbnail: Optional[str] = None


def to_product(record: Dict[str, Any]) -> Dict[str, Any]:
    return Product.model_validate(record).model_dump()


# 👤 Пользователь (upstream)
class DummyUser(BaseModel):
    id: Optional[int] = None
    username: str
    email: Optional[str] = None
    firstName: str
    lastName: str
    gender: Optional[Literal["female", "male", "unknown"]] = None
    image: str
    token: str

    class Config:
        extra = "allow"


class DummyError(BaseModel):
    message: str


# public login shape, "image" becomes "avatar"
class User(BaseModel):
    firstName: str
    lastName: str
    username: str
    avatar: str
    token: str

    @classmethod
    def from_upstream(cls, profile: DummyUser) -> "User":
        return cls(
            firstName=profile.firstName,
            lastName=profile.lastName,
            username=profile.username,
            avatar=profile.image,
            token=profile.token,
        )


# 🛒 Корзина
class CartPayload(BaseModel):
    productId: StrictInt

    @field_validator("productId")
    @classmethod
    def not_zero(cls, v: int) -> int:
        # 0 counts as "no product", any other integer is accepted
        if v == 0:
            raise ValueError("productId must not be 0")
        return v


class CartMessage(BaseModel):
    message: str


class ErrorOut(BaseModel):
    error: str


# 🔑 Decoded credential payload
class TokenUser(BaseModel):
    id: StrictInt

    class Config:
        extra = "allow"


class TokenClaims(BaseModel):
    user: TokenUser

    class Config:
        extra = "allow"
