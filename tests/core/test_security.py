"""
Tests for ID token verification.
"""

from unittest.mock import patch

import jwt
import pytest

from scholarstream.core import security
from scholarstream.core.exceptions import UnauthenticatedError


@pytest.mark.asyncio
async def test_valid_token_returns_normalized_claims():
    payload = {"sub": "uid-1", "email": " Ada@Example.COM ", "name": "Ada"}
    with patch.object(security, "decode_token", return_value=payload):
        claims = await security.verify_id_token("token")

    assert claims == security.IdentityClaims(uid="uid-1", email="ada@example.com", name="Ada")


@pytest.mark.asyncio
async def test_expired_token_is_unauthenticated():
    with patch.object(security, "decode_token", side_effect=jwt.ExpiredSignatureError()):
        with pytest.raises(UnauthenticatedError):
            await security.verify_id_token("token")


@pytest.mark.asyncio
async def test_key_fetch_failure_is_unauthenticated():
    with patch.object(security, "decode_token", side_effect=jwt.PyJWKClientError("no keys")):
        with pytest.raises(UnauthenticatedError) as exc_info:
            await security.verify_id_token("token")

    assert "no keys" not in exc_info.value.message


@pytest.mark.asyncio
async def test_token_without_email_is_unauthenticated():
    with patch.object(security, "decode_token", return_value={"sub": "uid-1"}):
        with pytest.raises(UnauthenticatedError):
            await security.verify_id_token("token")
