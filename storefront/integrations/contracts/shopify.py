"""
Shopify transport contracts.

Every caller of the Storefront API relies on these shapes:
- ShopifyResponse: what a successful fetch returns
- ShopifyError: the single error type raised for transport and platform faults
- user-error helpers for the data-level errors returned by customer mutations
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

NOT_LOGGED_IN_CODE = "CUSTOMER_NOT_LOGGED_IN"
NOT_LOGGED_IN_MESSAGE = "Customer not logged in"


@dataclass
class ShopifyResponse:
    status: int
    body: Dict[str, Any] = field(default_factory=dict)

    @property
    def data(self) -> Dict[str, Any]:
        return self.body.get("data") or {}


class ShopifyError(Exception):
    """Transport or platform-reported GraphQL failure."""

    def __init__(self, message: str, *, cause: str = "unknown", status: int = 500, query: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause or "unknown"
        self.status = status or 500
        self.query = query

    @classmethod
    def from_graphql_error(cls, error: Any, *, query: str, status: Optional[int] = None) -> "ShopifyError":
        """Build from the first entry of a GraphQL ``errors`` array."""
        if not isinstance(error, dict):
            return cls(str(error), status=status or 500, query=query)
        extensions = error.get("extensions") or {}
        return cls(
            str(error.get("message") or "Unknown Shopify error"),
            cause=str(extensions.get("code") or "unknown"),
            status=status or 500,
            query=query,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cause": self.cause,
            "status": self.status,
            "message": self.message,
            "query": self.query,
        }

    def __repr__(self) -> str:
        return f"ShopifyError(status={self.status}, cause={self.cause!r}, message={self.message!r})"


def not_logged_in_errors() -> List[Dict[str, Any]]:
    """Local precondition failure, shaped like a customer user error."""
    return [{"field": None, "message": NOT_LOGGED_IN_MESSAGE, "code": NOT_LOGGED_IN_CODE}]


def is_not_logged_in(errors: Optional[List[Dict[str, Any]]]) -> bool:
    return bool(errors) and any((e or {}).get("code") == NOT_LOGGED_IN_CODE for e in errors)


def first_error_message(errors: Optional[List[Dict[str, Any]]], default: str = "Request failed") -> str:
    if not errors:
        return default
    return str((errors[0] or {}).get("message") or default)
