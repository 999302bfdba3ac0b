"""
Identity Token Verification

Verifies ID tokens issued by the external identity provider. Tokens are RS256
JWTs whose signing keys are published at a JWKS endpoint; the issuer and
audience are pinned to the configured project.

Every failure mode (bad signature, expired, wrong audience, key fetch error,
timeout) collapses into the same ``UnauthenticatedError`` so that callers never
see provider-internal detail.
"""

import asyncio
import logging
from dataclasses import dataclass

import jwt
from jwt import PyJWKClient

from scholarstream.core.config import settings
from scholarstream.core.exceptions import UnauthenticatedError

logger = logging.getLogger(__name__)

ALGORITHMS = ["RS256"]

_jwks_client: PyJWKClient | None = None


@dataclass(frozen=True)
class IdentityClaims:
    """Claims extracted from a verified ID token."""

    uid: str
    email: str
    name: str | None = None


def _get_jwks_client() -> PyJWKClient:
    global _jwks_client
    if _jwks_client is None:
        _jwks_client = PyJWKClient(
            settings.identity_jwks_url,
            cache_keys=True,
            timeout=int(settings.identity_timeout_seconds),
        )
    return _jwks_client


def decode_token(token: str) -> dict:
    """
    Decode and validate an ID token synchronously.

    Raises:
        jwt.PyJWTError: If the token or its signing key is invalid
    """
    signing_key = _get_jwks_client().get_signing_key_from_jwt(token)
    return jwt.decode(
        token,
        signing_key.key,
        algorithms=ALGORITHMS,
        audience=settings.identity_project_id,
        issuer=settings.effective_identity_issuer,
        options={"require": ["exp", "iat", "sub"]},
    )


async def verify_id_token(token: str) -> IdentityClaims:
    """
    Verify an ID token against the identity provider.

    The blocking key fetch and decode run in a worker thread and are bounded
    by ``identity_timeout_seconds``.

    Args:
        token: Raw bearer token from the Authorization header

    Returns:
        IdentityClaims for the authenticated principal

    Raises:
        UnauthenticatedError: If the token cannot be verified
    """
    try:
        payload = await asyncio.wait_for(
            asyncio.to_thread(decode_token, token),
            timeout=settings.identity_timeout_seconds,
        )
    except TimeoutError as e:
        logger.warning("ID token verification timed out")
        raise UnauthenticatedError() from e
    except jwt.PyJWTError as e:
        logger.warning(f"ID token rejected: {type(e).__name__}")
        raise UnauthenticatedError() from e

    email = payload.get("email")
    if not email:
        logger.warning("ID token has no email claim")
        raise UnauthenticatedError()

    return IdentityClaims(
        uid=payload["sub"],
        email=email.strip().lower(),
        name=payload.get("name"),
    )
