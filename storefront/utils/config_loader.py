"""
Configuration loader for the storefront service
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from storefront.constants import CART_ID_COOKIE, CUSTOMER_ACCESS_TOKEN_COOKIE, SHOPIFY_GRAPHQL_API_ENDPOINT

logger = logging.getLogger(__name__)


class ShopifyConfig(BaseModel):
    """Storefront API transport configuration"""

    graphql_api_path: str = SHOPIFY_GRAPHQL_API_ENDPOINT
    timeout_seconds: float = Field(default=20.0, gt=0.0, le=120.0)


class CookieConfig(BaseModel):
    customer_access_token: str = CUSTOMER_ACCESS_TOKEN_COOKIE
    cart_id: str = CART_ID_COOKIE


class CacheConfig(BaseModel):
    ttl_seconds: int = Field(default=86400, ge=1)


class APIConfig(BaseModel):
    cors_allow_origins: List[str] = Field(default_factory=lambda: ["*"])


class StorefrontConfig(BaseModel):
    """Complete storefront configuration"""

    shopify: ShopifyConfig = Field(default_factory=ShopifyConfig)
    cookies: CookieConfig = Field(default_factory=CookieConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    api: APIConfig = Field(default_factory=APIConfig)


class ShopifySettings(BaseModel):
    """Secrets and deployment settings read from the environment"""

    store_domain: str = ""
    storefront_access_token: str = ""
    revalidation_secret: str = ""
    environment: str = "development"

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() == "production"


def ensure_starts_with(value: str, prefix: str) -> str:
    return value if value.startswith(prefix) else f"{prefix}{value}"


def load_storefront_config(config_path: Optional[Path] = None) -> StorefrontConfig:
    """
    Load and validate storefront configuration from YAML file

    Args:
        config_path: Path to config file. Defaults to $STOREFRONT_CONFIG_PATH,
            then config/storefront_config.yml

    Returns:
        Validated StorefrontConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValidationError: If config doesn't match schema
    """
    if config_path is None:
        env_path = os.getenv("STOREFRONT_CONFIG_PATH", "").strip()
        if env_path:
            config_path = Path(env_path)
        else:
            config_path = Path(__file__).parent.parent.parent / "config" / "storefront_config.yml"

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    try:
        cfg = StorefrontConfig(**data)
        logger.info("Successfully loaded storefront config from %s", config_path)
        return cfg
    except ValidationError as e:
        logger.error("Storefront config validation failed: %s", e)
        raise


def load_shopify_settings() -> ShopifySettings:
    """Read Shopify credentials from the environment (call load_dotenv() first)."""
    domain = os.getenv("SHOPIFY_STORE_DOMAIN", "").strip()
    settings = ShopifySettings(
        store_domain=ensure_starts_with(domain, "https://") if domain else "",
        storefront_access_token=os.getenv("SHOPIFY_STOREFRONT_ACCESS_TOKEN", ""),
        revalidation_secret=os.getenv("SHOPIFY_REVALIDATION_SECRET", ""),
        environment=os.getenv("ENVIRONMENT", "development"),
    )
    if not settings.store_domain:
        logger.warning("SHOPIFY_STORE_DOMAIN is not set.")
    if not settings.storefront_access_token:
        logger.warning("SHOPIFY_STOREFRONT_ACCESS_TOKEN is not set.")
    return settings
