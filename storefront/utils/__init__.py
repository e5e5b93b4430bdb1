"""
Utility modules for the storefront service
"""
from .config_loader import (
    StorefrontConfig,
    ShopifySettings,
    ensure_starts_with,
    load_shopify_settings,
    load_storefront_config,
)

__all__ = [
    'StorefrontConfig',
    'ShopifySettings',
    'ensure_starts_with',
    'load_shopify_settings',
    'load_storefront_config',
]
