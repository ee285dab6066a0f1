import pytest
from jose import jwt

from app.auth import extract_user_id, strip_bearer
from app.errors import InvalidToken


@pytest.mark.parametrize("header, expected", [
    ("Bearer abc.def.ghi", "abc.def.ghi"),
    ("bearer abc", "abc"),
    ("abc", "abc"),
    ("Bearer  abc ", "abc"),
])
def test_strip_bearer(header, expected):
    assert strip_bearer(header) == expected


def test_extract_user_id_ignores_signature():
    token = jwt.encode({"user": {"id": 42, "username": "x"}}, "whatever-secret", algorithm="HS256")
    assert extract_user_id(token) == 42


@pytest.mark.parametrize("claims", [
    {"user": {"id": "42"}},
    {"user": {"username": "no-id"}},
    {"user": 42},
    {"id": 42},
])
def test_extract_user_id_rejects_bad_shapes(claims):
    token = jwt.encode(claims, "k", algorithm="HS256")
    with pytest.raises(InvalidToken):
        extract_user_id(token)


def test_extract_user_id_rejects_garbage():
    with pytest.raises(InvalidToken):
        extract_user_id("garbage")
