"""
Real HTTP integration clients.

Important:
- ShopifyClient is the ONLY place where Storefront API HTTP calls are made
- It must raise ShopifyError for every failure so callers see one error shape
"""
from .shopify import ShopifyClient

__all__ = ["ShopifyClient"]
