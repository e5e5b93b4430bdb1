import pytest

from storefront.integrations.contracts.shopify import ShopifyError, is_not_logged_in
from storefront.integrations.graphql.customer import (
    CUSTOMER_ACCESS_TOKEN_CREATE_MUTATION,
    CUSTOMER_ACCESS_TOKEN_DELETE_MUTATION,
    CUSTOMER_UPDATE_MUTATION,
    GET_CUSTOMER_QUERY,
)
from storefront.integrations.policy.customer_service import CustomerService
from tests.fakes import FakeShopifyClient, FakeTokenStore


def _token_created(token="tok-1", expires_at="2030-01-01T00:00:00Z"):
    return {
        "data": {
            "customerAccessTokenCreate": {
                "customerAccessToken": {"accessToken": token, "expiresAt": expires_at},
                "customerUserErrors": [],
            }
        }
    }


@pytest.mark.asyncio
async def test_login_persists_token_with_expiry():
    shopify = FakeShopifyClient(_token_created())
    tokens = FakeTokenStore()

    result = await CustomerService(shopify, tokens).login_customer("ada@example.com", "pw")

    assert result == {"accessToken": "tok-1", "expiresAt": "2030-01-01T00:00:00Z"}
    assert tokens.token == "tok-1"
    assert tokens.expires_at == "2030-01-01T00:00:00Z"
    call = shopify.calls[0]
    assert call["query"] == CUSTOMER_ACCESS_TOKEN_CREATE_MUTATION
    assert call["variables"] == {"input": {"email": "ada@example.com", "password": "pw"}}


@pytest.mark.asyncio
async def test_login_user_errors_are_data_and_do_not_touch_session():
    errors = [{"code": "UNIDENTIFIED_CUSTOMER", "field": ["input"], "message": "Unidentified customer"}]
    shopify = FakeShopifyClient(
        {"data": {"customerAccessTokenCreate": {"customerAccessToken": None, "customerUserErrors": errors}}}
    )
    tokens = FakeTokenStore()

    result = await CustomerService(shopify, tokens).login_customer("ada@example.com", "wrong")

    assert result == {"errors": errors}
    assert tokens.token is None


@pytest.mark.asyncio
async def test_login_transport_failure_propagates():
    shopify = FakeShopifyClient(ShopifyError("boom", cause="ConnectError"))
    with pytest.raises(ShopifyError):
        await CustomerService(shopify, FakeTokenStore()).login_customer("a@example.com", "pw")


@pytest.mark.asyncio
async def test_login_malformed_payload_raises_with_query():
    shopify = FakeShopifyClient({"data": {}})
    with pytest.raises(ShopifyError) as exc_info:
        await CustomerService(shopify, FakeTokenStore()).login_customer("a@example.com", "pw")
    assert exc_info.value.query == CUSTOMER_ACCESS_TOKEN_CREATE_MUTATION


@pytest.mark.asyncio
async def test_logout_without_session_makes_no_call():
    shopify = FakeShopifyClient()
    tokens = FakeTokenStore()

    assert await CustomerService(shopify, tokens).logout_customer() is True
    assert shopify.calls == []


@pytest.mark.asyncio
async def test_logout_revokes_and_clears():
    shopify = FakeShopifyClient({"data": {"customerAccessTokenDelete": {"deletedAccessToken": "tok-1"}}})
    tokens = FakeTokenStore("tok-1")

    assert await CustomerService(shopify, tokens).logout_customer() is True
    assert shopify.calls[0]["query"] == CUSTOMER_ACCESS_TOKEN_DELETE_MUTATION
    assert shopify.calls[0]["variables"] == {"customerAccessToken": "tok-1"}
    assert tokens.cleared is True
    assert tokens.token is None


@pytest.mark.asyncio
async def test_logout_clears_session_even_when_revoke_fails():
    shopify = FakeShopifyClient(ShopifyError("Timed out", cause="ReadTimeout"))
    tokens = FakeTokenStore("tok-1")

    assert await CustomerService(shopify, tokens).logout_customer() is False
    assert tokens.cleared is True


@pytest.mark.asyncio
async def test_get_customer_reads_token_and_reshapes():
    shopify = FakeShopifyClient(
        {
            "data": {
                "customer": {
                    "id": "c1",
                    "email": "ada@example.com",
                    "addresses": {"edges": [{"node": {"id": "a1", "city": "Kampala"}}]},
                    "orders": {"edges": []},
                }
            }
        }
    )

    customer = await CustomerService(shopify, FakeTokenStore("tok-1")).get_customer()

    assert customer["id"] == "c1"
    assert customer["addresses"] == [{"id": "a1", "city": "Kampala"}]
    assert shopify.calls[0]["query"] == GET_CUSTOMER_QUERY
    assert shopify.calls[0]["variables"] == {"customerAccessToken": "tok-1"}


@pytest.mark.asyncio
async def test_get_customer_none_without_session_or_on_failure():
    assert await CustomerService(FakeShopifyClient(), FakeTokenStore()).get_customer() is None

    expired = FakeShopifyClient(ShopifyError("Access denied", cause="ACCESS_DENIED", status=401))
    assert await CustomerService(expired, FakeTokenStore("stale")).get_customer() is None

    null_customer = FakeShopifyClient({"data": {"customer": None}})
    assert await CustomerService(null_customer, FakeTokenStore("stale")).get_customer() is None


@pytest.mark.asyncio
async def test_create_customer_returns_customer_or_errors():
    shopify = FakeShopifyClient(
        {"data": {"customerCreate": {"customer": {"id": "c2", "email": "new@example.com"}, "customerUserErrors": []}}},
        {
            "data": {
                "customerCreate": {
                    "customer": None,
                    "customerUserErrors": [{"code": "TAKEN", "field": ["input", "email"], "message": "Email has already been taken"}],
                }
            }
        },
    )
    service = CustomerService(shopify, FakeTokenStore())

    created = await service.create_customer({"email": "new@example.com", "password": "pw", "acceptsMarketing": False})
    taken = await service.create_customer({"email": "new@example.com", "password": "pw"})

    assert created == {"customer": {"id": "c2", "email": "new@example.com"}}
    assert taken["errors"][0]["code"] == "TAKEN"
    assert shopify.calls[0]["variables"]["input"]["acceptsMarketing"] is False


@pytest.mark.asyncio
async def test_update_customer_injects_session_token():
    shopify = FakeShopifyClient(
        {"data": {"customerUpdate": {"customer": {"id": "c1", "firstName": "Grace"}, "customerUserErrors": []}}}
    )

    result = await CustomerService(shopify, FakeTokenStore("tok-1")).update_customer({"firstName": "Grace"})

    assert result == {"customer": {"id": "c1", "firstName": "Grace"}}
    assert shopify.calls[0]["query"] == CUSTOMER_UPDATE_MUTATION
    assert shopify.calls[0]["variables"] == {"customer": {"firstName": "Grace", "customerAccessToken": "tok-1"}}


@pytest.mark.asyncio
async def test_customer_scoped_writes_require_session():
    shopify = FakeShopifyClient()
    service = CustomerService(shopify, FakeTokenStore())

    updated = await service.update_customer({"firstName": "Grace"})
    created = await service.create_customer_address({"city": "Kampala"})
    changed = await service.update_customer_address("addr-1", {"city": "Entebbe"})
    deleted = await service.delete_customer_address("addr-1")

    for result in (updated, created, changed, deleted):
        assert is_not_logged_in(result["errors"])
        assert result["errors"][0]["message"] == "Customer not logged in"
    assert deleted["success"] is False
    assert shopify.calls == []


@pytest.mark.asyncio
async def test_address_book_round_trip():
    shopify = FakeShopifyClient(
        {"data": {"customerAddressCreate": {"customerAddress": {"id": "addr-1"}, "customerUserErrors": []}}},
        {"data": {"customerAddressUpdate": {"customerAddress": {"id": "addr-1", "city": "Entebbe"}, "customerUserErrors": []}}},
        {"data": {"customerAddressDelete": {"deletedCustomerAddressId": "addr-1", "customerUserErrors": []}}},
    )
    service = CustomerService(shopify, FakeTokenStore("tok-1"))

    assert await service.create_customer_address({"city": "Kampala"}) == {"customerAddress": {"id": "addr-1"}}
    assert (await service.update_customer_address("addr-1", {"city": "Entebbe"}))["customerAddress"]["city"] == "Entebbe"
    assert await service.delete_customer_address("addr-1") == {"success": True, "deletedCustomerAddressId": "addr-1"}

    assert shopify.calls[1]["variables"] == {"customerAccessToken": "tok-1", "id": "addr-1", "address": {"city": "Entebbe"}}
    assert shopify.calls[2]["variables"] == {"customerAccessToken": "tok-1", "id": "addr-1"}


@pytest.mark.asyncio
async def test_delete_address_user_error():
    errors = [{"code": "NOT_FOUND", "field": ["id"], "message": "Address does not exist"}]
    shopify = FakeShopifyClient({"data": {"customerAddressDelete": {"deletedCustomerAddressId": None, "customerUserErrors": errors}}})

    result = await CustomerService(shopify, FakeTokenStore("tok-1")).delete_customer_address("addr-9")

    assert result == {"success": False, "errors": errors}


@pytest.mark.asyncio
async def test_recover_customer():
    shopify = FakeShopifyClient(
        {"data": {"customerRecover": {"customerUserErrors": []}}},
        {"data": {"customerRecover": {"customerUserErrors": [{"code": "UNIDENTIFIED_CUSTOMER", "message": "Could not find customer"}]}}},
    )
    service = CustomerService(shopify, FakeTokenStore())

    assert await service.recover_customer("ada@example.com") == {"success": True}
    failed = await service.recover_customer("nobody@example.com")
    assert failed["success"] is False
    assert failed["errors"][0]["code"] == "UNIDENTIFIED_CUSTOMER"
    assert shopify.calls[0]["variables"] == {"email": "ada@example.com"}
