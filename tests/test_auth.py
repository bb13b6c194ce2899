"""
Tests for admin credentials and bearer tokens
"""

from datetime import timedelta

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from fdp_portal.auth import (
    authenticate_admin,
    create_access_token,
    create_admin_token,
    get_current_admin,
    hash_password,
    verify_password,
)


def test_verify_password_rejects_bad_hashes():
    hashed = hash_password("correct-horse")

    assert verify_password("correct-horse", hashed) is True
    assert verify_password("wrong", hashed) is False
    assert verify_password("correct-horse", None) is False
    assert verify_password("correct-horse", "not-a-hash") is False


def test_authenticate_admin():
    hashed = hash_password("correct-horse")

    assert authenticate_admin(" Admin@FDP.test ", "correct-horse", "admin@fdp.test", hashed) is True
    assert authenticate_admin("other@fdp.test", "correct-horse", "admin@fdp.test", hashed) is False
    assert authenticate_admin("admin@fdp.test", "correct-horse", None, hashed) is False


def _bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


async def test_admin_token_round_trip():
    admin = await get_current_admin(_bearer(create_admin_token("admin@fdp.test")))

    assert admin == {"email": "admin@fdp.test", "role": "admin"}


@pytest.mark.parametrize("credentials", [
    None,
    _bearer("garbage"),
    _bearer(create_access_token({"email": "x@fdp.test", "role": "faculty"})),
    _bearer(create_access_token({"email": "admin@fdp.test", "role": "admin"}, timedelta(seconds=-5))),
])
async def test_rejected_tokens(credentials):
    with pytest.raises(HTTPException) as exc:
        await get_current_admin(credentials)

    assert exc.value.status_code == 401
