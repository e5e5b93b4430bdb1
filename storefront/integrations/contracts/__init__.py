"""
Contracts (data models).

Request/response shapes shared by the Shopify transport, the services built
on it, and the HTTP adapters.
"""
from .shopify import (
    NOT_LOGGED_IN_CODE,
    NOT_LOGGED_IN_MESSAGE,
    ShopifyError,
    ShopifyResponse,
    first_error_message,
    is_not_logged_in,
    not_logged_in_errors,
)

__all__ = [
    "NOT_LOGGED_IN_CODE",
    "NOT_LOGGED_IN_MESSAGE",
    "ShopifyError",
    "ShopifyResponse",
    "first_error_message",
    "is_not_logged_in",
    "not_logged_in_errors",
]
