from typing import Optional

from fastapi import APIRouter, Depends, Header, Query, Response

from storefront.api.dependencies import get_commerce_service
from storefront.integrations.policy.commerce_service import CommerceService

router = APIRouter()


@router.post("/revalidate", tags=["Revalidation"])
async def revalidate(
    response: Response,
    secret: Optional[str] = Query(default=None, description="Shared revalidation secret"),
    x_shopify_topic: Optional[str] = Header(default=None, alias="x-shopify-topic"),
    commerce: CommerceService = Depends(get_commerce_service),
):
    """
    Shopify webhook receiver.
    - Bad or missing secret -> 401.
    - Product / collection topics invalidate the matching cache tag.
    - Every other topic is acknowledged with 200 so Shopify stops retrying.
    """
    status_code, body = commerce.revalidate(topic=x_shopify_topic, secret=secret)
    response.status_code = status_code
    return body
