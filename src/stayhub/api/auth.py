"""Identity gate: OIDC JWT verification against a JWKS endpoint.

Provides:
- authenticate(): Validates a bearer token and returns the caller identity
- get_current_caller(): FastAPI dependency for authenticated routes

Group membership comes from the ``cognito:groups`` claim, falling back to a
plain ``groups`` claim. Either may be a list or a comma-separated string.
"""

from __future__ import annotations

import os
import threading
import time
from typing import Any

import jwt
import requests
from fastapi import Request

from stayhub.domain.errors import AuthError, StorageError
from stayhub.domain.models import CallerIdentity

# JWKS cache with TTL
_jwks_cache: dict[str, Any] | None = None
_jwks_cache_time: float = 0
_jwks_cache_lock = threading.Lock()
_JWKS_CACHE_TTL = 600  # 10 minutes

_GROUP_CLAIMS = ("cognito:groups", "groups")


def _get_settings() -> dict[str, str | list[str] | None]:
    """Load OIDC settings from environment."""
    authorized_parties_raw = os.environ.get("OIDC_AUTHORIZED_PARTIES", "")
    authorized_parties: list[str] | None = None
    if authorized_parties_raw:
        authorized_parties = [p.strip() for p in authorized_parties_raw.split(",") if p.strip()]

    return {
        "issuer": os.environ.get("OIDC_ISSUER"),
        "audience": os.environ.get("OIDC_AUDIENCE"),
        "jwks_url": os.environ.get("OIDC_JWKS_URL"),
        "authorized_parties": authorized_parties,
    }


def _fetch_jwks(jwks_url: str) -> dict[str, Any]:
    resp = requests.get(jwks_url, timeout=10)
    resp.raise_for_status()
    return resp.json()


def _get_jwks(jwks_url: str, force_refresh: bool = False) -> dict[str, Any]:
    """Get JWKS with caching."""
    global _jwks_cache, _jwks_cache_time

    with _jwks_cache_lock:
        now = time.time()
        if not force_refresh and _jwks_cache is not None and (now - _jwks_cache_time) < _JWKS_CACHE_TTL:
            return _jwks_cache

        try:
            _jwks_cache = _fetch_jwks(jwks_url)
        except requests.RequestException as exc:
            raise StorageError("Auth temporarily unavailable") from exc
        _jwks_cache_time = now
        return _jwks_cache


def _find_key(jwks: dict[str, Any], kid: str) -> dict[str, Any] | None:
    for key in jwks.get("keys", []):
        if key.get("kid") == kid:
            return key
    return None


def _parse_groups(payload: dict[str, Any]) -> frozenset[str]:
    for claim in _GROUP_CLAIMS:
        raw = payload.get(claim)
        if raw is None:
            continue
        if isinstance(raw, str):
            return frozenset(g.strip() for g in raw.split(",") if g.strip())
        if isinstance(raw, (list, tuple)):
            return frozenset(str(g) for g in raw)
    return frozenset()


def verify_token(token: str) -> dict[str, Any]:
    """Verify a JWT and return its claims.

    Raises:
        AuthError: If the token is invalid, expired or OIDC is not configured.
        StorageError: If the JWKS endpoint cannot be reached.
    """
    settings = _get_settings()

    issuer = settings.get("issuer")
    audience = settings.get("audience")
    jwks_url = settings.get("jwks_url")

    if not issuer or not audience or not jwks_url:
        raise AuthError("OIDC not configured")

    try:
        unverified_header = jwt.get_unverified_header(token)
    except jwt.exceptions.DecodeError:
        raise AuthError("Invalid token")

    kid = unverified_header.get("kid")
    if not kid:
        raise AuthError("Invalid token")

    jwks = _get_jwks(jwks_url)
    key_data = _find_key(jwks, kid)

    # Unknown kid: keys may have rotated, refresh once
    if key_data is None:
        jwks = _get_jwks(jwks_url, force_refresh=True)
        key_data = _find_key(jwks, kid)

    if key_data is None:
        raise AuthError("Invalid token")

    def _try_verify(jwk_data: dict[str, Any]) -> dict[str, Any]:
        try:
            public_key = jwt.algorithms.RSAAlgorithm.from_jwk(jwk_data)
        except (ValueError, TypeError, jwt.exceptions.InvalidKeyError):
            raise AuthError("Invalid token")

        return jwt.decode(
            token,
            public_key,
            algorithms=["RS256"],
            issuer=issuer,
            audience=audience,
            options={"require": ["exp", "iss", "aud", "sub"]},
        )

    try:
        payload = _try_verify(key_data)
    except jwt.InvalidSignatureError:
        jwks = _get_jwks(jwks_url, force_refresh=True)
        key_data = _find_key(jwks, kid)
        if key_data is None:
            raise AuthError("Invalid token")
        try:
            payload = _try_verify(key_data)
        except jwt.InvalidTokenError:
            raise AuthError("Invalid token")
    except jwt.ExpiredSignatureError:
        raise AuthError("Token expired")
    except jwt.InvalidTokenError:
        raise AuthError("Invalid token")

    authorized_parties = settings.get("authorized_parties")
    if authorized_parties and "azp" in payload:
        if payload["azp"] not in authorized_parties:
            raise AuthError("Invalid token")

    if not payload.get("sub"):
        raise AuthError("Invalid token")

    return payload


def authenticate(token: str) -> CallerIdentity:
    """Resolve a bearer token to the caller's id and group memberships."""
    payload = verify_token(token)
    return CallerIdentity(id=str(payload["sub"]), groups=_parse_groups(payload))


def _extract_bearer_token(request: Request) -> str:
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        raise AuthError("Missing authorization header")

    parts = auth_header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise AuthError("Invalid authorization header")

    return parts[1]


def get_current_caller(request: Request) -> CallerIdentity:
    """FastAPI dependency: authenticated caller from the Authorization header.

    Raises:
        AuthError: 401 if the token is missing or invalid.
    """
    return authenticate(_extract_bearer_token(request))
