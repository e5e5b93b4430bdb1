"""
Cookie-backed storage for opaque session values (customer access token, cart id).

The token is never parsed; it is stored and read back verbatim.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Optional

from fastapi import Request, Response

logger = logging.getLogger(__name__)

_UNSET = object()


def parse_expires_at(expires_at: Optional[str]) -> Optional[datetime]:
    """Parse the platform's ISO-8601 ``expiresAt`` into an aware UTC datetime."""
    if not expires_at:
        return None
    raw = expires_at.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        logger.warning("Ignoring unparseable token expiry: %r", expires_at)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


class SessionTokenStore(ABC):
    """Read / write / clear one opaque session value."""

    @abstractmethod
    def read(self) -> Optional[str]:
        """Return the current value, or None when absent."""

    @abstractmethod
    def write(self, token: str, expires_at: Optional[str] = None) -> None:
        """Persist a value, expiring at ``expires_at`` (ISO-8601) when given."""

    @abstractmethod
    def clear(self) -> None:
        """Remove the value."""


class CookieTokenStore(SessionTokenStore):
    """
    Session value held in an HTTP-only, SameSite=strict cookie scoped to ``/``.

    Reads come from the incoming request; writes and clears go on the
    outgoing response. A write or clear is visible to later reads within the
    same request.
    """

    def __init__(
        self,
        request: Request,
        response: Response,
        cookie_name: str,
        secure: bool = False,
        samesite: str = "strict",
    ) -> None:
        self.request = request
        self.response = response
        self.cookie_name = cookie_name
        self.secure = secure
        self.samesite = samesite
        self._pending = _UNSET

    def read(self) -> Optional[str]:
        if self._pending is not _UNSET:
            return self._pending
        return self.request.cookies.get(self.cookie_name) or None

    def write(self, token: str, expires_at: Optional[str] = None) -> None:
        self.response.set_cookie(
            key=self.cookie_name,
            value=token,
            expires=parse_expires_at(expires_at),
            path="/",
            httponly=True,
            secure=self.secure,
            samesite=self.samesite,
        )
        self._pending = token

    def clear(self) -> None:
        self.response.delete_cookie(
            key=self.cookie_name,
            path="/",
            httponly=True,
            secure=self.secure,
            samesite=self.samesite,
        )
        self._pending = None
