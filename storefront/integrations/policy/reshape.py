"""
Reshape Storefront API payloads into flat view models.

Everything here is pure: no I/O, inputs are never mutated, and list order
always follows the edge order returned by the platform.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Iterable, List, Optional

from storefront.constants import HIDDEN_PRODUCT_TAG

CUSTOMER_FIELDS = (
    "id",
    "firstName",
    "lastName",
    "displayName",
    "email",
    "phone",
    "acceptsMarketing",
    "createdAt",
    "defaultAddress",
)

ADDRESS_FIELDS = (
    "id",
    "address1",
    "address2",
    "city",
    "company",
    "country",
    "firstName",
    "lastName",
    "phone",
    "province",
    "zip",
)

ORDER_FIELDS = ("id", "orderNumber", "processedAt", "financialStatus", "fulfillmentStatus")

LINE_ITEM_FIELDS = ("title", "quantity", "variant")

_FILENAME_RE = re.compile(r".*/(.*)\..*")


def _pick(source: Dict[str, Any], fields: Iterable[str]) -> Dict[str, Any]:
    # Absent fields stay absent.
    return {name: source[name] for name in fields if name in source}


def remove_edges_and_nodes(connection: Optional[Dict[str, Any]]) -> List[Any]:
    """Flatten ``{"edges": [{"node": x}, ...]}`` into ``[x, ...]``."""
    if not connection:
        return []
    return [edge.get("node") if edge else None for edge in connection.get("edges") or []]


def _reshape_order(node: Dict[str, Any]) -> Dict[str, Any]:
    order = _pick(node, ORDER_FIELDS)
    if "currentTotalPrice" in node:
        order["totalPrice"] = node["currentTotalPrice"]
    if node.get("lineItems"):
        order["lineItems"] = [_pick(item or {}, LINE_ITEM_FIELDS) for item in remove_edges_and_nodes(node["lineItems"])]
    return order


def reshape_customer(customer: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    if not customer:
        return {}

    reshaped = _pick(customer, CUSTOMER_FIELDS)

    if customer.get("addresses"):
        reshaped["addresses"] = [_pick(node or {}, ADDRESS_FIELDS) for node in remove_edges_and_nodes(customer["addresses"])]

    if customer.get("orders"):
        reshaped["orders"] = [_reshape_order(node or {}) for node in remove_edges_and_nodes(customer["orders"])]

    return reshaped


def reshape_cart(cart: Dict[str, Any]) -> Dict[str, Any]:
    """Flatten cart lines; a missing tax total defaults to zero in the cart currency."""
    cost = dict(cart.get("cost") or {})
    if not cost.get("totalTaxAmount"):
        cost["totalTaxAmount"] = {
            "amount": "0.0",
            "currencyCode": (cost.get("totalAmount") or {}).get("currencyCode"),
        }

    return {
        **cart,
        "cost": cost,
        "lines": remove_edges_and_nodes(cart.get("lines")),
    }


def reshape_collection(collection: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if not collection:
        return None

    return {
        **collection,
        "path": f"/search/{collection.get('handle', '')}",
    }


def reshape_collections(collections: Iterable[Optional[Dict[str, Any]]]) -> List[Dict[str, Any]]:
    reshaped = []
    for collection in collections or []:
        item = reshape_collection(collection)
        if item:
            reshaped.append(item)
    return reshaped


def reshape_images(images: Optional[Dict[str, Any]], product_title: str) -> List[Dict[str, Any]]:
    reshaped = []
    for image in remove_edges_and_nodes(images):
        if not image:
            continue
        alt_text = image.get("altText")
        if not alt_text:
            match = _FILENAME_RE.match(image.get("url") or "")
            alt_text = f"{product_title} - {match.group(1)}" if match else product_title
        reshaped.append({**image, "altText": alt_text})
    return reshaped


def reshape_product(
    product: Optional[Dict[str, Any]],
    filter_hidden_products: bool = True,
    hidden_tag: str = HIDDEN_PRODUCT_TAG,
) -> Optional[Dict[str, Any]]:
    """Return None for a missing product, or a hidden one when filtering is on."""
    if not product:
        return None
    if filter_hidden_products and hidden_tag in (product.get("tags") or []):
        return None

    rest = {k: v for k, v in product.items() if k not in ("images", "variants")}
    return {
        **rest,
        "images": reshape_images(product.get("images"), product.get("title") or ""),
        "variants": remove_edges_and_nodes(product.get("variants")),
    }


def reshape_products(products: Iterable[Optional[Dict[str, Any]]], filter_hidden_products: bool = True) -> List[Dict[str, Any]]:
    reshaped = []
    for product in products or []:
        item = reshape_product(product, filter_hidden_products)
        if item:
            reshaped.append(item)
    return reshaped
