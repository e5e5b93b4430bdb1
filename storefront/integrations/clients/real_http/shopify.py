"""
Shopify Storefront GraphQL HTTP client.

Purpose:
- POSTs a query + variables to the store's Storefront API endpoint
- Always sends the storefront access-token header
- Normalizes every failure (network, HTTP status, GraphQL ``errors``) into ShopifyError

Important:
- No retries; a failure is raised once and the caller decides what to do
- Access tokens in variables are never logged
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Mapping, Optional

import httpx

from storefront.constants import SHOPIFY_ACCESS_TOKEN_HEADER, SHOPIFY_GRAPHQL_API_ENDPOINT
from storefront.integrations.contracts.shopify import ShopifyError, ShopifyResponse
from storefront.utils.config_loader import ensure_starts_with

logger = logging.getLogger(__name__)


class ShopifyClient:
    def __init__(
        self,
        store_domain: Optional[str] = None,
        access_token: Optional[str] = None,
        api_path: Optional[str] = None,
        timeout_seconds: float = 20.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        domain = (store_domain if store_domain is not None else os.getenv("SHOPIFY_STORE_DOMAIN", "")).strip()
        self.domain = ensure_starts_with(domain, "https://") if domain else ""
        self.access_token = access_token if access_token is not None else os.getenv("SHOPIFY_STOREFRONT_ACCESS_TOKEN", "")
        self.endpoint = f"{self.domain}{api_path or SHOPIFY_GRAPHQL_API_ENDPOINT}"
        self.timeout_seconds = timeout_seconds
        self._http_client = http_client
        if not self.domain:
            logger.warning("Shopify store domain is not set; requests will fail.")

    def _build_headers(self, headers: Optional[Mapping[str, str]]) -> httpx.Headers:
        request_headers = httpx.Headers(
            {
                "Content-Type": "application/json",
                SHOPIFY_ACCESS_TOKEN_HEADER: self.access_token,
            }
        )
        if headers:
            request_headers.update(headers)
        if not request_headers.get(SHOPIFY_ACCESS_TOKEN_HEADER):
            request_headers[SHOPIFY_ACCESS_TOKEN_HEADER] = self.access_token
        return request_headers

    async def _post(self, payload: Dict[str, Any], headers: httpx.Headers) -> httpx.Response:
        if self._http_client is not None:
            return await self._http_client.post(self.endpoint, json=payload, headers=headers)
        async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
            return await client.post(self.endpoint, json=payload, headers=headers)

    async def fetch(
        self,
        query: str,
        variables: Optional[Dict[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> ShopifyResponse:
        """
        Run one GraphQL operation.

        Returns ShopifyResponse(status, body) on success.

        Raises:
            ShopifyError: on transport failure, a non-JSON body, a GraphQL
                ``errors`` array (first error wins), or an HTTP error status.
        """
        payload: Dict[str, Any] = {}
        if query:
            payload["query"] = query
        if variables:
            payload["variables"] = variables

        try:
            response = await self._post(payload, self._build_headers(headers))
        except httpx.HTTPError as e:
            logger.error("Request error connecting to Shopify: %s", e)
            raise ShopifyError(str(e) or "Shopify request failed", cause=type(e).__name__, query=query) from e

        try:
            body = response.json()
        except ValueError as e:
            logger.error("Undecodable Shopify response: status=%s", response.status_code)
            raise ShopifyError(
                "Invalid JSON response from Shopify",
                cause="invalid_json",
                status=response.status_code if response.is_error else 500,
                query=query,
            ) from e

        errors = body.get("errors") if isinstance(body, dict) else None
        if errors:
            first = errors[0] if isinstance(errors, list) else errors
            logger.warning("Shopify returned GraphQL errors: %s", first)
            raise ShopifyError.from_graphql_error(
                first,
                query=query,
                status=response.status_code if response.is_error else None,
            )

        if response.is_error:
            logger.error("HTTP error from Shopify: %s", response.status_code)
            raise ShopifyError(
                f"Shopify responded with HTTP {response.status_code}",
                cause="http_status",
                status=response.status_code,
                query=query,
            )

        return ShopifyResponse(status=response.status_code, body=body if isinstance(body, dict) else {})
