"""Signed, time-limited bearer tokens.

Tokens are HS256 JWTs carrying ``sub`` (the user id as a string), ``email``,
``iat`` and ``exp``. Nothing is persisted: a token stays valid until it
expires or the signing secret changes.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable

import jwt

from .errors import InvalidToken
from .models import Identity

logger = logging.getLogger("authboard.tokens")

_REQUIRED_CLAIMS = ["sub", "email", "iat", "exp"]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TokenIssuer:
    """Mint and verify bearer tokens with a process-wide secret."""

    def __init__(
        self,
        secret: str,
        *,
        ttl: timedelta = timedelta(hours=24),
        algorithm: str = "HS256",
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        if not secret:
            raise ValueError("A token signing secret must be provided")
        self._secret = secret
        self._ttl = ttl
        self._algorithm = algorithm
        self._clock = clock

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def issue(self, user_id: int, email: str) -> str:
        issued_at = self._clock()
        payload = {
            "sub": str(user_id),
            "email": email,
            "iat": issued_at,
            "exp": issued_at + self._ttl,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> Identity:
        """Return the identity encoded in ``token`` or raise :class:`InvalidToken`.

        Expiry is measured against the issuer's clock, the same one used to
        stamp ``iat`` and ``exp`` when the token was minted.
        """
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": _REQUIRED_CLAIMS, "verify_exp": False, "verify_iat": False},
            )
            if claims["exp"] <= self._clock().timestamp():
                raise jwt.ExpiredSignatureError("Signature has expired")
            return Identity(user_id=int(claims["sub"]), email=str(claims["email"]))
        except jwt.ExpiredSignatureError as exc:
            logger.info("Rejected expired token")
            raise InvalidToken() from exc
        except (jwt.PyJWTError, ValueError, TypeError) as exc:
            logger.warning("Rejected invalid token: %s", exc.__class__.__name__)
            raise InvalidToken() from exc


__all__ = ["TokenIssuer", "utc_now"]
