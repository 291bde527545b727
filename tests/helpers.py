"""Shared test helpers (plain functions, not fixtures)."""

from __future__ import annotations

import base64
import time
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import jwt
from cryptography.hazmat.primitives.asymmetric import rsa

from stayhub.domain.models import CallerIdentity

FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

OIDC_ENV = {
    "OIDC_ISSUER": "https://auth.example.com",
    "OIDC_AUDIENCE": "stayhub-api",
    "OIDC_JWKS_URL": "https://auth.example.com/.well-known/jwks.json",
}


def renter(user_id: str = "user-1") -> CallerIdentity:
    return CallerIdentity(id=user_id)


def host(host_id: str = "host-1", *groups: str) -> CallerIdentity:
    return CallerIdentity(id=host_id, groups=frozenset(groups or ("hosts",)))


def seed_days(store, listing_id: str, start: date, prices, available: bool = True) -> None:
    """Write consecutive calendar days starting at ``start``, one per price."""
    for offset, price in enumerate(prices):
        store.put_day(
            listing_id,
            start + timedelta(days=offset),
            is_available=available,
            price=Decimal(str(price)),
        )


def _generate_rsa_keypair():
    """Generate RSA key pair for test JWT signing."""
    private_key = rsa.generate_private_key(
        public_exponent=65537,
        key_size=2048,
    )
    public_key = private_key.public_key()
    return private_key, public_key


def _create_jwks(public_key, kid: str = "test-key-1") -> dict:
    """Create JWKS from public key."""
    public_numbers = public_key.public_numbers()

    def int_to_base64(n: int) -> str:
        byte_length = (n.bit_length() + 7) // 8
        return (
            base64.urlsafe_b64encode(n.to_bytes(byte_length, "big"))
            .rstrip(b"=")
            .decode()
        )

    return {
        "keys": [
            {
                "kty": "RSA",
                "use": "sig",
                "alg": "RS256",
                "kid": kid,
                "n": int_to_base64(public_numbers.n),
                "e": int_to_base64(public_numbers.e),
            }
        ]
    }


def _create_token(
    private_key,
    kid: str = "test-key-1",
    sub: str = "user-1",
    iss: str = OIDC_ENV["OIDC_ISSUER"],
    aud: str = OIDC_ENV["OIDC_AUDIENCE"],
    exp: int | None = None,
    azp: str | None = None,
    groups=None,
    groups_claim: str = "cognito:groups",
) -> str:
    """Create signed JWT for testing."""
    now = int(time.time())
    payload = {
        "sub": sub,
        "iss": iss,
        "aud": aud,
        "exp": exp if exp is not None else now + 3600,
        "iat": now,
    }
    if azp:
        payload["azp"] = azp
    if groups is not None:
        payload[groups_claim] = groups

    return jwt.encode(payload, private_key, algorithm="RS256", headers={"kid": kid})
