import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from storefront.api.dependencies import get_cart_token_store, get_commerce_service
from storefront.integrations.contracts.shopify import ShopifyError
from storefront.integrations.policy.commerce_service import CommerceService
from storefront.session.token_store import CookieTokenStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Catalog"])


class CartLineInput(BaseModel):
    merchandiseId: str
    quantity: int = Field(default=1, ge=1)


class CartLineUpdate(BaseModel):
    id: str
    merchandiseId: str
    quantity: int = Field(ge=0)


class AddLinesRequest(BaseModel):
    lines: List[CartLineInput]


class UpdateLinesRequest(BaseModel):
    lines: List[CartLineUpdate]


class RemoveLinesRequest(BaseModel):
    lineIds: List[str]


def _shopify_http_error(e: ShopifyError) -> HTTPException:
    logger.error("Shopify catalog call failed: status=%s message=%s", e.status, e.message)
    return HTTPException(status_code=e.status if 400 <= e.status < 600 else 502, detail={"error": e.message})


@router.get("/products")
async def list_products(
    query: Optional[str] = Query(default=None),
    reverse: Optional[bool] = Query(default=None),
    sort_key: Optional[str] = Query(default=None, alias="sortKey"),
    commerce: CommerceService = Depends(get_commerce_service),
):
    try:
        return {"products": await commerce.get_products(query=query, reverse=reverse, sort_key=sort_key)}
    except ShopifyError as e:
        raise _shopify_http_error(e) from e


@router.get("/products/{handle}")
async def get_product(handle: str, commerce: CommerceService = Depends(get_commerce_service)):
    try:
        product = await commerce.get_product(handle)
    except ShopifyError as e:
        raise _shopify_http_error(e) from e
    if product is None:
        raise HTTPException(status_code=404, detail={"error": "Product not found"})
    return {"product": product}


@router.get("/products/{product_id:path}/recommendations")
async def get_product_recommendations(product_id: str, commerce: CommerceService = Depends(get_commerce_service)):
    try:
        return {"products": await commerce.get_product_recommendations(product_id)}
    except ShopifyError as e:
        raise _shopify_http_error(e) from e


@router.get("/collections")
async def list_collections(commerce: CommerceService = Depends(get_commerce_service)):
    try:
        return {"collections": await commerce.get_collections()}
    except ShopifyError as e:
        raise _shopify_http_error(e) from e


@router.get("/collections/{handle}")
async def get_collection(handle: str, commerce: CommerceService = Depends(get_commerce_service)):
    try:
        collection = await commerce.get_collection(handle)
    except ShopifyError as e:
        raise _shopify_http_error(e) from e
    if collection is None:
        raise HTTPException(status_code=404, detail={"error": "Collection not found"})
    return {"collection": collection}


@router.get("/collections/{handle}/products")
async def get_collection_products(
    handle: str,
    reverse: Optional[bool] = Query(default=None),
    sort_key: Optional[str] = Query(default=None, alias="sortKey"),
    commerce: CommerceService = Depends(get_commerce_service),
):
    try:
        return {"products": await commerce.get_collection_products(handle, reverse=reverse, sort_key=sort_key)}
    except ShopifyError as e:
        raise _shopify_http_error(e) from e


@router.get("/menus/{handle}")
async def get_menu(handle: str, commerce: CommerceService = Depends(get_commerce_service)):
    try:
        return {"menu": await commerce.get_menu(handle)}
    except ShopifyError as e:
        raise _shopify_http_error(e) from e


@router.get("/pages")
async def list_pages(commerce: CommerceService = Depends(get_commerce_service)):
    try:
        return {"pages": await commerce.get_pages()}
    except ShopifyError as e:
        raise _shopify_http_error(e) from e


@router.get("/pages/{handle}")
async def get_page(handle: str, commerce: CommerceService = Depends(get_commerce_service)):
    try:
        page = await commerce.get_page(handle)
    except ShopifyError as e:
        raise _shopify_http_error(e) from e
    if page is None:
        raise HTTPException(status_code=404, detail={"error": "Page not found"})
    return {"page": page}


# --- Cart -----------------------------------------------------------------------


@router.get("/cart", tags=["Cart"])
async def get_cart(
    commerce: CommerceService = Depends(get_commerce_service),
    cart_ids: CookieTokenStore = Depends(get_cart_token_store),
):
    try:
        return {"cart": await commerce.get_cart(cart_ids.read())}
    except ShopifyError as e:
        raise _shopify_http_error(e) from e


@router.post("/cart/lines", tags=["Cart"])
async def add_cart_lines(
    body: AddLinesRequest,
    commerce: CommerceService = Depends(get_commerce_service),
    cart_ids: CookieTokenStore = Depends(get_cart_token_store),
):
    """Add lines, creating a cart (and its cookie) on first use."""
    try:
        cart_id = cart_ids.read()
        if not cart_id:
            cart = await commerce.create_cart()
            cart_id = cart["id"]
            cart_ids.write(cart_id)
        cart = await commerce.add_to_cart(cart_id, [line.model_dump() for line in body.lines])
    except ShopifyError as e:
        raise _shopify_http_error(e) from e
    return {"cart": cart}


@router.put("/cart/lines", tags=["Cart"])
async def update_cart_lines(
    body: UpdateLinesRequest,
    commerce: CommerceService = Depends(get_commerce_service),
    cart_ids: CookieTokenStore = Depends(get_cart_token_store),
):
    cart_id = cart_ids.read()
    if not cart_id:
        raise HTTPException(status_code=400, detail={"error": "Missing cart ID"})
    try:
        return {"cart": await commerce.update_cart(cart_id, [line.model_dump() for line in body.lines])}
    except ShopifyError as e:
        raise _shopify_http_error(e) from e


@router.delete("/cart/lines", tags=["Cart"])
async def remove_cart_lines(
    body: RemoveLinesRequest,
    commerce: CommerceService = Depends(get_commerce_service),
    cart_ids: CookieTokenStore = Depends(get_cart_token_store),
):
    cart_id = cart_ids.read()
    if not cart_id:
        raise HTTPException(status_code=400, detail={"error": "Missing cart ID"})
    try:
        return {"cart": await commerce.remove_from_cart(cart_id, body.lineIds)}
    except ShopifyError as e:
        raise _shopify_http_error(e) from e
