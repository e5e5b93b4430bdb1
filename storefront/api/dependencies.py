"""
FastAPI dependencies.

Long-lived collaborators (config, settings, Shopify client, tag cache) are
created once in storefront.api.main and kept on ``app.state``; per-request
objects (cookie stores, services) are built here from the request.
"""

from fastapi import Depends, Request, Response

from storefront.error_handler import ErrorHandler
from storefront.integrations.clients.real_http.shopify import ShopifyClient
from storefront.integrations.policy.commerce_service import CommerceService
from storefront.integrations.policy.customer_service import CustomerService
from storefront.session.token_store import CookieTokenStore
from storefront.utils.config_loader import ShopifySettings, StorefrontConfig


def get_config(request: Request) -> StorefrontConfig:
    return request.app.state.config


def get_settings(request: Request) -> ShopifySettings:
    return request.app.state.settings


def get_shopify_client(request: Request) -> ShopifyClient:
    return request.app.state.shopify_client


def get_tag_cache(request: Request):
    return request.app.state.tag_cache


def get_error_handler() -> ErrorHandler:
    return ErrorHandler()


def get_customer_token_store(
    request: Request,
    response: Response,
    config: StorefrontConfig = Depends(get_config),
    settings: ShopifySettings = Depends(get_settings),
) -> CookieTokenStore:
    return CookieTokenStore(
        request,
        response,
        cookie_name=config.cookies.customer_access_token,
        secure=settings.is_production,
    )


def get_cart_token_store(
    request: Request,
    response: Response,
    config: StorefrontConfig = Depends(get_config),
    settings: ShopifySettings = Depends(get_settings),
) -> CookieTokenStore:
    return CookieTokenStore(
        request,
        response,
        cookie_name=config.cookies.cart_id,
        secure=settings.is_production,
        samesite="lax",
    )


def get_customer_service(
    client: ShopifyClient = Depends(get_shopify_client),
    tokens: CookieTokenStore = Depends(get_customer_token_store),
) -> CustomerService:
    return CustomerService(client, tokens)


def get_commerce_service(
    client: ShopifyClient = Depends(get_shopify_client),
    cache=Depends(get_tag_cache),
    config: StorefrontConfig = Depends(get_config),
    settings: ShopifySettings = Depends(get_settings),
) -> CommerceService:
    return CommerceService(
        client,
        cache,
        revalidation_secret=settings.revalidation_secret,
        cache_ttl=config.cache.ttl_seconds,
    )
