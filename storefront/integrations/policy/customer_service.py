"""
Customer account and session operations.

All customer-scoped calls read the access token fresh from the session
store on every call; nothing is held in memory between requests.

Error policy:
- platform user errors (``customerUserErrors``) are returned as data: {"errors": [...]}
- a missing session is returned as data too, with code CUSTOMER_NOT_LOGGED_IN
- transport / GraphQL failures raise ShopifyError carrying the operation's query
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from storefront.integrations.clients.real_http.shopify import ShopifyClient
from storefront.integrations.contracts.shopify import ShopifyError, not_logged_in_errors
from storefront.integrations.graphql.customer import (
    CUSTOMER_ACCESS_TOKEN_CREATE_MUTATION,
    CUSTOMER_ACCESS_TOKEN_DELETE_MUTATION,
    CUSTOMER_ADDRESS_CREATE_MUTATION,
    CUSTOMER_ADDRESS_DELETE_MUTATION,
    CUSTOMER_ADDRESS_UPDATE_MUTATION,
    CUSTOMER_CREATE_MUTATION,
    CUSTOMER_RECOVER_MUTATION,
    CUSTOMER_UPDATE_MUTATION,
    GET_CUSTOMER_QUERY,
)
from storefront.integrations.policy.reshape import reshape_customer
from storefront.session.token_store import SessionTokenStore

logger = logging.getLogger(__name__)


class CustomerService:
    def __init__(self, client: ShopifyClient, tokens: SessionTokenStore):
        self.client = client
        self.tokens = tokens

    async def _mutate(self, query: str, variables: Dict[str, Any], root: str) -> Dict[str, Any]:
        """Run a mutation and return ``data[root]``; every failure becomes ShopifyError."""
        try:
            res = await self.client.fetch(query, variables)
            payload = res.body["data"][root]
        except ShopifyError:
            raise
        except (KeyError, TypeError) as e:
            logger.error("Malformed Shopify response for %s: %s", root, e)
            raise ShopifyError(f"Malformed response for {root}", cause=type(e).__name__, query=query) from e
        if not isinstance(payload, dict):
            raise ShopifyError(f"Malformed response for {root}", cause="missing_payload", query=query)
        return payload

    # --- Session -------------------------------------------------------------

    async def login_customer(self, email: str, password: str) -> Dict[str, Any]:
        payload = await self._mutate(
            CUSTOMER_ACCESS_TOKEN_CREATE_MUTATION,
            {"input": {"email": email, "password": password}},
            "customerAccessTokenCreate",
        )

        errors = payload.get("customerUserErrors") or []
        if errors:
            logger.info("Login rejected by Shopify: %s", errors[0].get("code"))
            return {"errors": errors}

        token = payload.get("customerAccessToken") or {}
        access_token = token.get("accessToken")
        expires_at = token.get("expiresAt")
        if not access_token:
            raise ShopifyError(
                "Missing customer access token",
                cause="missing_payload",
                query=CUSTOMER_ACCESS_TOKEN_CREATE_MUTATION,
            )

        self.tokens.write(access_token, expires_at)
        return {"accessToken": access_token, "expiresAt": expires_at}

    async def logout_customer(self) -> bool:
        """Best-effort: the session is cleared even when the remote delete fails."""
        access_token = self.tokens.read()
        if not access_token:
            return True

        try:
            await self.client.fetch(CUSTOMER_ACCESS_TOKEN_DELETE_MUTATION, {"customerAccessToken": access_token})
            return True
        except Exception as e:
            logger.warning("Access token delete failed: %s", e)
            return False
        finally:
            self.tokens.clear()

    async def get_customer(self) -> Optional[Dict[str, Any]]:
        """Current customer, or None when there is no valid session."""
        access_token = self.tokens.read()
        if not access_token:
            return None

        try:
            res = await self.client.fetch(GET_CUSTOMER_QUERY, {"customerAccessToken": access_token})
            customer = res.data.get("customer")
        except Exception as e:
            logger.info("Customer lookup failed, treating as signed out: %s", e)
            return None

        if not customer:
            return None
        return reshape_customer(customer)

    # --- Account -------------------------------------------------------------

    async def create_customer(self, profile: Dict[str, Any]) -> Dict[str, Any]:
        """Register a customer. Does not sign them in."""
        payload = await self._mutate(CUSTOMER_CREATE_MUTATION, {"input": profile}, "customerCreate")

        errors = payload.get("customerUserErrors") or []
        if errors:
            return {"errors": errors}
        return {"customer": reshape_customer(payload.get("customer"))}

    async def update_customer(self, customer: Dict[str, Any]) -> Dict[str, Any]:
        access_token = self.tokens.read()
        if not access_token:
            return {"errors": not_logged_in_errors()}

        payload = await self._mutate(
            CUSTOMER_UPDATE_MUTATION,
            {"customer": {**customer, "customerAccessToken": access_token}},
            "customerUpdate",
        )

        errors = payload.get("customerUserErrors") or []
        if errors:
            return {"errors": errors}
        return {"customer": reshape_customer(payload.get("customer"))}

    async def recover_customer(self, email: str) -> Dict[str, Any]:
        payload = await self._mutate(CUSTOMER_RECOVER_MUTATION, {"email": email}, "customerRecover")

        errors = payload.get("customerUserErrors") or []
        if errors:
            return {"success": False, "errors": errors}
        return {"success": True}

    # --- Addresses -----------------------------------------------------------

    async def create_customer_address(self, address: Dict[str, Any]) -> Dict[str, Any]:
        access_token = self.tokens.read()
        if not access_token:
            return {"errors": not_logged_in_errors()}

        payload = await self._mutate(
            CUSTOMER_ADDRESS_CREATE_MUTATION,
            {"customerAccessToken": access_token, "address": address},
            "customerAddressCreate",
        )

        errors = payload.get("customerUserErrors") or []
        if errors:
            return {"errors": errors}
        return {"customerAddress": payload.get("customerAddress")}

    async def update_customer_address(self, address_id: str, address: Dict[str, Any]) -> Dict[str, Any]:
        access_token = self.tokens.read()
        if not access_token:
            return {"errors": not_logged_in_errors()}

        payload = await self._mutate(
            CUSTOMER_ADDRESS_UPDATE_MUTATION,
            {"customerAccessToken": access_token, "id": address_id, "address": address},
            "customerAddressUpdate",
        )

        errors = payload.get("customerUserErrors") or []
        if errors:
            return {"errors": errors}
        return {"customerAddress": payload.get("customerAddress")}

    async def delete_customer_address(self, address_id: str) -> Dict[str, Any]:
        access_token = self.tokens.read()
        if not access_token:
            return {"success": False, "errors": not_logged_in_errors()}

        payload = await self._mutate(
            CUSTOMER_ADDRESS_DELETE_MUTATION,
            {"customerAccessToken": access_token, "id": address_id},
            "customerAddressDelete",
        )

        errors = payload.get("customerUserErrors") or []
        if errors:
            return {"success": False, "errors": errors}
        return {"success": True, "deletedCustomerAddressId": payload.get("deletedCustomerAddressId")}
