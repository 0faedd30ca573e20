"""Bearer token guard for protected API routes."""
from __future__ import annotations

from typing import Optional

from fastapi import Request
from fastapi.security.utils import get_authorization_scheme_param

from .errors import MissingToken
from .models import Identity
from .tokens import TokenIssuer


class AccessGuard:
    """Turn an ``Authorization`` header into a verified :class:`Identity`.

    A missing or non-bearer header raises :class:`MissingToken`; a token that
    fails verification raises :class:`~authboard.errors.InvalidToken`. The
    token is self-contained, so no store lookup happens here.
    """

    def __init__(self, tokens: TokenIssuer) -> None:
        self._tokens = tokens

    def authenticate(self, authorization: Optional[str]) -> Identity:
        scheme, credentials = get_authorization_scheme_param(authorization)
        if not authorization or scheme.lower() != "bearer" or not credentials.strip():
            raise MissingToken()
        return self._tokens.verify(credentials.strip())

    async def __call__(self, request: Request) -> Identity:
        identity = self.authenticate(request.headers.get("authorization"))
        request.state.identity = identity
        return identity


__all__ = ["AccessGuard"]
