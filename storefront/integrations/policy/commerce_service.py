"""
Catalog and cart operations on the Storefront API.

Catalog reads go through a tag-keyed cache (tags: collections, products);
the revalidation webhook invalidates those tags. Cart reads and writes are
never cached.
"""

from __future__ import annotations

import hmac
import json
import logging
import time
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Tuple

from storefront.constants import COLLECTION_WEBHOOKS, COLLECTIONS_TAG, PRODUCT_WEBHOOKS, PRODUCTS_TAG
from storefront.integrations.clients.real_http.shopify import ShopifyClient
from storefront.integrations.graphql.cart import (
    ADD_TO_CART_MUTATION,
    CREATE_CART_MUTATION,
    EDIT_CART_ITEMS_MUTATION,
    GET_CART_QUERY,
    REMOVE_FROM_CART_MUTATION,
)
from storefront.integrations.graphql.catalog import (
    GET_COLLECTION_PRODUCTS_QUERY,
    GET_COLLECTION_QUERY,
    GET_COLLECTIONS_QUERY,
    GET_MENU_QUERY,
    GET_PAGE_QUERY,
    GET_PAGES_QUERY,
    GET_PRODUCT_QUERY,
    GET_PRODUCT_RECOMMENDATIONS_QUERY,
    GET_PRODUCTS_QUERY,
)
from storefront.integrations.policy.reshape import (
    remove_edges_and_nodes,
    reshape_cart,
    reshape_collection,
    reshape_collections,
    reshape_product,
    reshape_products,
)

logger = logging.getLogger(__name__)


def _all_collection() -> Dict[str, Any]:
    return {
        "handle": "",
        "title": "All",
        "description": "All products",
        "seo": {"title": "All", "description": "All products"},
        "path": "/search",
        "updatedAt": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
    }


class CommerceService:
    def __init__(self, client: ShopifyClient, cache, revalidation_secret: str = "", cache_ttl: Optional[int] = None):
        self.client = client
        self.cache = cache
        self.revalidation_secret = revalidation_secret
        self.cache_ttl = cache_ttl

    async def _cached(self, name: str, args: Dict[str, Any], tags: Iterable[str], loader: Callable[[], Awaitable[Any]]) -> Any:
        key = f"{name}:{json.dumps(args, sort_keys=True, default=str)}"
        hit = self.cache.get(key)
        if hit is not None:
            return hit
        value = await loader()
        if value is not None:
            self.cache.set(key, value, tags=tuple(tags), ttl=self.cache_ttl)
        return value

    # --- Cart ----------------------------------------------------------------

    async def create_cart(self) -> Dict[str, Any]:
        res = await self.client.fetch(CREATE_CART_MUTATION)
        return reshape_cart(res.data["cartCreate"]["cart"])

    async def add_to_cart(self, cart_id: str, lines: List[Dict[str, Any]]) -> Dict[str, Any]:
        res = await self.client.fetch(ADD_TO_CART_MUTATION, {"cartId": cart_id, "lines": lines})
        return reshape_cart(res.data["cartLinesAdd"]["cart"])

    async def remove_from_cart(self, cart_id: str, line_ids: List[str]) -> Dict[str, Any]:
        res = await self.client.fetch(REMOVE_FROM_CART_MUTATION, {"cartId": cart_id, "lineIds": line_ids})
        return reshape_cart(res.data["cartLinesRemove"]["cart"])

    async def update_cart(self, cart_id: str, lines: List[Dict[str, Any]]) -> Dict[str, Any]:
        res = await self.client.fetch(EDIT_CART_ITEMS_MUTATION, {"cartId": cart_id, "lines": lines})
        return reshape_cart(res.data["cartLinesUpdate"]["cart"])

    async def get_cart(self, cart_id: Optional[str]) -> Optional[Dict[str, Any]]:
        if not cart_id:
            return None

        res = await self.client.fetch(GET_CART_QUERY, {"cartId": cart_id})
        # Carts become null after checkout.
        cart = res.data.get("cart")
        if not cart:
            return None
        return reshape_cart(cart)

    # --- Collections -----------------------------------------------------------

    async def get_collection(self, handle: str) -> Optional[Dict[str, Any]]:
        async def load():
            res = await self.client.fetch(GET_COLLECTION_QUERY, {"handle": handle})
            return reshape_collection(res.data.get("collection"))

        return await self._cached("collection", {"handle": handle}, [COLLECTIONS_TAG], load)

    async def get_collection_products(
        self,
        collection: str,
        reverse: Optional[bool] = None,
        sort_key: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        async def load():
            res = await self.client.fetch(
                GET_COLLECTION_PRODUCTS_QUERY,
                {
                    "handle": collection,
                    "reverse": reverse,
                    "sortKey": "CREATED" if sort_key == "CREATED_AT" else sort_key,
                },
            )
            found = res.data.get("collection")
            if not found:
                logger.info("No collection found for `%s`", collection)
                return []
            return reshape_products(remove_edges_and_nodes(found.get("products")))

        args = {"collection": collection, "reverse": reverse, "sort_key": sort_key}
        return await self._cached("collection_products", args, [COLLECTIONS_TAG, PRODUCTS_TAG], load)

    async def get_collections(self) -> List[Dict[str, Any]]:
        async def load():
            res = await self.client.fetch(GET_COLLECTIONS_QUERY)
            shopify_collections = remove_edges_and_nodes(res.data.get("collections"))
            # Collections whose handle starts with `hidden` stay off the search page.
            visible = [c for c in reshape_collections(shopify_collections) if not (c.get("handle") or "").startswith("hidden")]
            return [_all_collection(), *visible]

        return await self._cached("collections", {}, [COLLECTIONS_TAG], load)

    async def get_menu(self, handle: str) -> List[Dict[str, str]]:
        async def load():
            res = await self.client.fetch(GET_MENU_QUERY, {"handle": handle})
            menu = res.data.get("menu") or {}
            return [
                {
                    "title": item.get("title"),
                    "path": (item.get("url") or "")
                    .replace(self.client.domain, "")
                    .replace("/collections", "/search")
                    .replace("/pages", ""),
                }
                for item in menu.get("items") or []
            ]

        return await self._cached("menu", {"handle": handle}, [COLLECTIONS_TAG], load)

    # --- Pages -------------------------------------------------------------------

    async def get_page(self, handle: str) -> Optional[Dict[str, Any]]:
        res = await self.client.fetch(GET_PAGE_QUERY, {"handle": handle})
        return res.data.get("pageByHandle")

    async def get_pages(self) -> List[Dict[str, Any]]:
        res = await self.client.fetch(GET_PAGES_QUERY)
        return remove_edges_and_nodes(res.data.get("pages"))

    # --- Products ----------------------------------------------------------------

    async def get_product(self, handle: str) -> Optional[Dict[str, Any]]:
        async def load():
            res = await self.client.fetch(GET_PRODUCT_QUERY, {"handle": handle})
            # Direct lookups show hidden products too.
            return reshape_product(res.data.get("product"), filter_hidden_products=False)

        return await self._cached("product", {"handle": handle}, [PRODUCTS_TAG], load)

    async def get_product_recommendations(self, product_id: str) -> List[Dict[str, Any]]:
        async def load():
            res = await self.client.fetch(GET_PRODUCT_RECOMMENDATIONS_QUERY, {"productId": product_id})
            return reshape_products(res.data.get("productRecommendations") or [])

        return await self._cached("product_recommendations", {"product_id": product_id}, [PRODUCTS_TAG], load)

    async def get_products(
        self,
        query: Optional[str] = None,
        reverse: Optional[bool] = None,
        sort_key: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        async def load():
            res = await self.client.fetch(GET_PRODUCTS_QUERY, {"query": query, "reverse": reverse, "sortKey": sort_key})
            return reshape_products(remove_edges_and_nodes(res.data.get("products")))

        args = {"query": query, "reverse": reverse, "sort_key": sort_key}
        return await self._cached("products", args, [PRODUCTS_TAG], load)

    # --- Revalidation --------------------------------------------------------------

    def revalidate(self, topic: Optional[str], secret: Optional[str]) -> Tuple[int, Dict[str, Any]]:
        """
        Handle a Shopify webhook. Returns (http_status, body).

        Any recognized or unrecognized topic answers 200 so Shopify does not
        keep retrying; only a bad secret is rejected.
        """
        topic = topic or "unknown"
        if not secret or not self.revalidation_secret or not hmac.compare_digest(secret, self.revalidation_secret):
            logger.error("Invalid revalidation secret.")
            return 401, {"status": 401}

        is_collection_update = topic in COLLECTION_WEBHOOKS
        is_product_update = topic in PRODUCT_WEBHOOKS

        if not is_collection_update and not is_product_update:
            return 200, {"status": 200}

        if is_collection_update:
            self.cache.invalidate_tag(COLLECTIONS_TAG)
        if is_product_update:
            self.cache.invalidate_tag(PRODUCTS_TAG)

        logger.info("Revalidated cache for topic %s", topic)
        return 200, {"status": 200, "revalidated": True, "now": int(time.time() * 1000)}
