"""Pytest fixtures for the storefront API tests."""

import pytest
from fastapi.testclient import TestClient

from storefront.database.cache import TagCache
from storefront.utils.config_loader import ShopifySettings
from tests.fakes import FakeShopifyClient


@pytest.fixture
def shopify():
    """Fake Shopify transport; queue response bodies on it per test."""
    return FakeShopifyClient()


@pytest.fixture
def tag_cache():
    return TagCache()


@pytest.fixture
def api(shopify, tag_cache):
    """TestClient wired to the fake Shopify client and a fresh tag cache."""
    from storefront.api import dependencies
    from storefront.api.main import app

    app.dependency_overrides[dependencies.get_shopify_client] = lambda: shopify
    app.dependency_overrides[dependencies.get_tag_cache] = lambda: tag_cache
    app.dependency_overrides[dependencies.get_settings] = lambda: ShopifySettings(
        store_domain="https://shop.example.com",
        storefront_access_token="storefront-key",
        revalidation_secret="s3cret",
        environment="development",
    )
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
