"""
FastAPI application - Main entry point

Run with: uvicorn storefront.api.main:app --host 127.0.0.1 --port 8000
"""

from dotenv import load_dotenv

load_dotenv()

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront.api.auth_router import router as auth_router
from storefront.api.catalog_router import router as catalog_router
from storefront.api.endpoints.revalidate import router as revalidate_router
from storefront.integrations.clients.real_http.shopify import ShopifyClient
from storefront.utils.config_loader import load_shopify_settings, load_storefront_config

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

config = load_storefront_config()
settings = load_shopify_settings()

# Initialize FastAPI app
app = FastAPI(
    title="Storefront API",
    description="Customer sessions, catalog and cart backed by the Shopify Storefront API",
    version="1.0.0",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.api.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ============================================================================
# DEPENDENCY INJECTION
# ============================================================================

# Tag cache: real Redis when REDIS_URL is set, else the in-memory stub
if os.getenv("REDIS_URL"):
    from storefront.database.cache_real import TagCache

    tag_cache = TagCache(url=os.environ["REDIS_URL"], default_ttl=config.cache.ttl_seconds)
else:
    from storefront.database.cache import TagCache

    tag_cache = TagCache(default_ttl=config.cache.ttl_seconds)

app.state.config = config
app.state.settings = settings
app.state.tag_cache = tag_cache
app.state.shopify_client = ShopifyClient(
    store_domain=settings.store_domain,
    access_token=settings.storefront_access_token,
    api_path=config.shopify.graphql_api_path,
    timeout_seconds=config.shopify.timeout_seconds,
)

app.include_router(auth_router, prefix="/api")
app.include_router(catalog_router, prefix="/api")
app.include_router(revalidate_router, prefix="/api")


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "shopify": "configured" if settings.store_domain and settings.storefront_access_token else "unconfigured",
        "cache": "connected" if tag_cache.ping() else "disconnected",
    }


@app.on_event("startup")
async def startup_event():
    """Check collaborators on startup"""
    logger.info("Starting Storefront API...")
    if not settings.revalidation_secret:
        logger.warning("SHOPIFY_REVALIDATION_SECRET is not set; revalidation webhooks will be rejected")

    if tag_cache.ping():
        logger.info("Cache connection successful")
    else:
        logger.warning("Cache connection failed")


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown"""
    logger.info("Shutting down Storefront API...")
