"""
Client-side customer session state.

One SessionState is constructed per application root and passed to whatever
renders the UI; there is no module-level instance. It talks to the storefront
API over an injected ``httpx.AsyncClient`` (which carries the session cookie)
and reports transient notifications through an injected ``notify`` callback.

Lifecycle: LOADING on construction, then AUTHENTICATED or UNAUTHENTICATED
after the first refresh. A failed session fetch counts as "no session"; it is
never surfaced as a separate error state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional

import httpx

logger = logging.getLogger(__name__)

Notifier = Callable[[str, str], None]


class SessionStatus(str, Enum):
    LOADING = "loading"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


@dataclass
class FormResult:
    """Outcome of a form submit: ``error`` is the inline message shown on failure."""

    ok: bool
    error: Optional[str] = None


def _silent(level: str, message: str) -> None:
    logger.info("[%s] %s", level, message)


class SessionState:
    def __init__(self, http_client: httpx.AsyncClient, notify: Optional[Notifier] = None, auth_path: str = "/api/auth"):
        self.http = http_client
        self.notify = notify or _silent
        self.auth_path = auth_path.rstrip("/")
        self.customer: Optional[Dict[str, Any]] = None
        self.status = SessionStatus.LOADING

    @property
    def is_authenticated(self) -> bool:
        return self.status == SessionStatus.AUTHENTICATED

    def _set_customer(self, customer: Optional[Dict[str, Any]]) -> None:
        self.customer = customer or None
        self.status = SessionStatus.AUTHENTICATED if self.customer else SessionStatus.UNAUTHENTICATED

    async def start(self) -> None:
        """Call once when the application root mounts."""
        await self.refresh()

    async def refresh(self) -> None:
        try:
            response = await self.http.get(self.auth_path)
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.info("Session fetch failed, treating as signed out: %s", e)
            self._set_customer(None)
            return

        self._set_customer(data.get("customer") if isinstance(data, dict) else None)

    async def logout(self) -> bool:
        """Sign out. On failure the current state is kept and only a notification is raised."""
        try:
            response = await self.http.post(self.auth_path, json={"action": "logout"})
        except httpx.HTTPError as e:
            logger.warning("Logout request failed: %s", e)
            self.notify("error", "Failed to logout")
            return False

        if not response.is_success:
            self.notify("error", "Failed to logout")
            return False

        self._set_customer(None)
        self.notify("success", "Logged out successfully")
        return True

    async def _submit(self, path: str, payload: Dict[str, Any], fallback: str) -> FormResult:
        try:
            response = await self.http.post(path, json=payload)
            result = response.json()
        except (httpx.HTTPError, ValueError) as e:
            self.notify("error", fallback)
            return FormResult(ok=False, error=str(e) or fallback)

        if not isinstance(result, dict):
            result = {}
        errors = result.get("errors")
        if not response.is_success or errors:
            message = ((errors or [{}])[0] or {}).get("message") or result.get("error") or fallback
            self.notify("error", fallback)
            return FormResult(ok=False, error=message)

        return FormResult(ok=True)

    async def login(self, email: str, password: str) -> FormResult:
        result = await self._submit(self.auth_path, {"action": "login", "email": email, "password": password}, "Login failed")
        if result.ok:
            await self.refresh()
            self.notify("success", "Login successful")
        return result

    async def register(self, profile: Dict[str, Any]) -> FormResult:
        """Create an account. The customer still has to log in afterwards."""
        payload = {"acceptsMarketing": False, **profile}
        result = await self._submit(f"{self.auth_path}/register", payload, "Registration failed")
        if result.ok:
            self.notify("success", "Registration successful! Please login.")
        return result
