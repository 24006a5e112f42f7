# nfl_rivalry/auth.py
"""
Access gate for the dataset and dashboard routes.

Sign-in itself happens elsewhere (an OAuth provider or an operator handing out
tokens). This module only decides whether a request is authenticated:
  - a Flask session carrying a "user" (set by /auth/login), or
  - an `Authorization: Bearer <token>` header matching a configured token.
"""

from __future__ import annotations

import hmac
from functools import wraps
from typing import Iterable, Optional

from flask import Request, request, session

from .errors import AuthRequiredError

SESSION_USER_KEY = "user"


class AuthGate:
    """Token/session check shared by every gated route."""

    def __init__(self, tokens: Iterable[str]) -> None:
        """Keep the non-empty configured tokens."""
        self._tokens = [t for t in tokens if t]

    def token_valid(self, token: Optional[str]) -> bool:
        """Constant-time check of a token against the configured ones (bytes, so non-ASCII input is just a mismatch)."""
        if not token:
            return False
        given = token.encode("utf-8", "surrogateescape")
        return any(hmac.compare_digest(given, t.encode("utf-8", "surrogateescape")) for t in self._tokens)

    @staticmethod
    def bearer_token(req: Request) -> Optional[str]:
        """The token from an `Authorization: Bearer` header, if any."""
        header = (req.headers.get("Authorization") or "").strip()
        if header.lower().startswith("bearer "):
            return header[7:].strip() or None
        return None

    def current_user(self, req: Request) -> Optional[str]:
        """The session user, "token" for bearer access, or None."""
        user = session.get(SESSION_USER_KEY)
        if isinstance(user, str) and user:
            return user
        if self.token_valid(self.bearer_token(req)):
            return "token"
        return None

    def require(self, req: Request) -> str:
        """
        Raises:
            AuthRequiredError when the request is not authenticated.
        """
        user = self.current_user(req)
        if user is None:
            raise AuthRequiredError()
        return user


def login_required(gate: AuthGate):
    """Route decorator that raises AuthRequiredError for anonymous callers."""

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            gate.require(request)
            return fn(*args, **kwargs)

        return wrapper

    return decorator
