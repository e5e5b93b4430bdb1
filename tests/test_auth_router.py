from storefront.integrations.contracts.shopify import ShopifyError

CUSTOMER_COOKIE = "customerAccessToken"


def _token_created(token="tok-1"):
    return {
        "data": {
            "customerAccessTokenCreate": {
                "customerAccessToken": {"accessToken": token, "expiresAt": "2030-01-01T00:00:00Z"},
                "customerUserErrors": [],
            }
        }
    }


def _login_rejected():
    return {
        "data": {
            "customerAccessTokenCreate": {
                "customerAccessToken": None,
                "customerUserErrors": [
                    {"code": "UNIDENTIFIED_CUSTOMER", "field": ["input"], "message": "Unidentified customer"}
                ],
            }
        }
    }


def test_login_requires_email_and_password(api, shopify):
    resp = api.post("/api/auth/login", json={"email": "ada@example.com"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Email and password are required"}

    resp = api.post("/api/auth/login")
    assert resp.status_code == 400
    assert shopify.calls == []


def test_login_success_sets_session_cookie(api, shopify):
    shopify.queue(_token_created())

    resp = api.post("/api/auth/login", json={"email": "ada@example.com", "password": "pw"})

    assert resp.status_code == 200
    assert resp.json() == {"success": True, "accessToken": "tok-1", "expiresAt": "2030-01-01T00:00:00Z"}
    cookie = resp.headers["set-cookie"].lower()
    assert cookie.startswith("customeraccesstoken=tok-1")
    assert "httponly" in cookie
    assert "samesite=strict" in cookie
    assert "path=/" in cookie
    assert "secure" not in cookie


def test_login_user_error_is_400_with_first_message(api, shopify):
    shopify.queue(_login_rejected())

    resp = api.post("/api/auth", json={"action": "login", "email": "ada@example.com", "password": "bad"})

    assert resp.status_code == 400
    body = resp.json()
    assert body["error"] == "Unidentified customer"
    assert body["errors"][0]["code"] == "UNIDENTIFIED_CUSTOMER"
    assert "set-cookie" not in resp.headers


def test_login_transport_failure_is_500(api, shopify):
    shopify.queue(ShopifyError("Service unavailable", cause="http_status", status=503))

    resp = api.post("/api/auth/login", json={"email": "ada@example.com", "password": "pw"})

    assert resp.status_code == 500
    assert resp.json() == {"error": "Service unavailable"}


def test_register_returns_new_customer_without_signing_in(api, shopify):
    shopify.queue(
        {"data": {"customerCreate": {"customer": {"id": "c2", "email": "new@example.com"}, "customerUserErrors": []}}}
    )

    resp = api.post(
        "/api/auth/register",
        json={"email": "new@example.com", "password": "pw", "firstName": "New", "acceptsMarketing": False},
    )

    assert resp.status_code == 200
    assert resp.json() == {"success": True, "customerId": "c2", "customer": {"id": "c2", "email": "new@example.com"}}
    assert shopify.calls[0]["variables"] == {
        "input": {"email": "new@example.com", "password": "pw", "firstName": "New", "acceptsMarketing": False}
    }
    assert "set-cookie" not in resp.headers


def test_register_unexpected_failure_uses_exception_message(api, shopify):
    shopify.queue(RuntimeError("socket closed"))

    resp = api.post("/api/auth", json={"action": "register", "email": "new@example.com", "password": "pw"})

    assert resp.status_code == 500
    assert resp.json() == {"error": "socket closed"}


def test_dispatch_rejects_unknown_action_and_bad_json(api, shopify):
    resp = api.post("/api/auth", json={"action": "dance"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid action"}

    resp = api.post("/api/auth", content=b"not json", headers={"Content-Type": "application/json"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid JSON body"}
    assert shopify.calls == []


def test_update_without_session_is_400(api, shopify):
    resp = api.post("/api/auth", json={"action": "update", "firstName": "Grace"})

    assert resp.status_code == 400
    assert resp.json()["error"] == "Customer not logged in"
    assert resp.json()["errors"][0]["code"] == "CUSTOMER_NOT_LOGGED_IN"
    assert shopify.calls == []


def test_update_with_session(api, shopify):
    api.cookies.set(CUSTOMER_COOKIE, "tok-1")
    shopify.queue({"data": {"customerUpdate": {"customer": {"id": "c1", "firstName": "Grace"}, "customerUserErrors": []}}})

    resp = api.post("/api/auth", json={"action": "update", "firstName": "Grace", "ignored": "x"})

    assert resp.status_code == 200
    assert resp.json() == {"success": True, "customer": {"id": "c1", "firstName": "Grace"}}
    assert shopify.calls[0]["variables"] == {"customer": {"firstName": "Grace", "customerAccessToken": "tok-1"}}


def test_logout_clears_cookie(api, shopify):
    api.cookies.set(CUSTOMER_COOKIE, "tok-1")
    shopify.queue({"data": {"customerAccessTokenDelete": {"deletedAccessToken": "tok-1"}}})

    resp = api.post("/api/auth", json={"action": "logout"})

    assert resp.status_code == 200
    assert resp.json() == {"success": True, "revoked": True}
    cookie = resp.headers["set-cookie"].lower()
    assert cookie.startswith("customeraccesstoken=")
    assert "max-age=0" in cookie


def test_logout_clears_cookie_when_revoke_fails(api, shopify):
    api.cookies.set(CUSTOMER_COOKIE, "tok-1")
    shopify.queue(ShopifyError("Timed out", cause="ReadTimeout"))

    resp = api.post("/api/auth", json={"action": "logout"})

    assert resp.status_code == 200
    assert resp.json() == {"success": True, "revoked": False}
    assert "max-age=0" in resp.headers["set-cookie"].lower()


def test_recover_action(api, shopify):
    shopify.queue({"data": {"customerRecover": {"customerUserErrors": []}}})

    resp = api.post("/api/auth", json={"action": "recover", "email": "ada@example.com"})

    assert resp.status_code == 200
    assert resp.json() == {"success": True}


def test_get_session_without_cookie(api, shopify):
    resp = api.get("/api/auth")

    assert resp.status_code == 200
    assert resp.json() == {"customer": None}
    assert shopify.calls == []


def test_get_session_with_cookie(api, shopify):
    api.cookies.set(CUSTOMER_COOKIE, "tok-1")
    shopify.queue({"data": {"customer": {"id": "c1", "email": "ada@example.com"}}})

    resp = api.get("/api/auth")

    assert resp.status_code == 200
    assert resp.json() == {"customer": {"id": "c1", "email": "ada@example.com"}}


def test_get_session_with_expired_token_is_signed_out(api, shopify):
    api.cookies.set(CUSTOMER_COOKIE, "stale")
    shopify.queue(ShopifyError("Access denied", cause="ACCESS_DENIED", status=401))

    resp = api.get("/api/auth")

    assert resp.status_code == 200
    assert resp.json() == {"customer": None}


def test_address_routes_require_session(api, shopify):
    resp = api.post("/api/auth/addresses", json={"city": "Kampala"})

    assert resp.status_code == 400
    assert resp.json()["error"] == "Customer not logged in"
    assert shopify.calls == []


def test_address_routes_with_session(api, shopify):
    api.cookies.set(CUSTOMER_COOKIE, "tok-1")
    shopify.queue(
        {"data": {"customerAddressCreate": {"customerAddress": {"id": "addr-1"}, "customerUserErrors": []}}},
        {"data": {"customerAddressUpdate": {"customerAddress": {"id": "addr-1", "city": "Entebbe"}, "customerUserErrors": []}}},
        {"data": {"customerAddressDelete": {"deletedCustomerAddressId": "addr-1", "customerUserErrors": []}}},
    )

    created = api.post("/api/auth/addresses", json={"city": "Kampala", "country": "Uganda"})
    updated = api.put("/api/auth/addresses/addr-1", json={"city": "Entebbe"})
    deleted = api.delete("/api/auth/addresses/addr-1")

    assert created.json() == {"success": True, "customerAddress": {"id": "addr-1"}}
    assert shopify.calls[0]["variables"]["address"] == {"city": "Kampala", "country": "Uganda"}
    assert updated.json()["customerAddress"]["city"] == "Entebbe"
    assert deleted.status_code == 200
    assert deleted.json() == {"success": True}


def test_per_action_routes_reject_undecodable_json(api, shopify):
    for path in ("/api/auth/login", "/api/auth/register"):
        resp = api.post(path, content=b"not json", headers={"Content-Type": "application/json"})
        assert resp.status_code == 400
        assert resp.json() == {"error": "Invalid JSON body"}

        resp = api.post(path, json=["ada@example.com", "pw"])
        assert resp.status_code == 400
        assert resp.json() == {"error": "Invalid JSON body"}
    assert shopify.calls == []


def test_wrongly_typed_fields_are_400_on_both_surfaces(api, shopify):
    login = api.post("/api/auth/login", json={"email": 5, "password": "pw"})
    register = api.post("/api/auth/register", json={"email": 5, "password": "pw"})
    dispatched = api.post("/api/auth", json={"action": "login", "email": "ada@example.com", "password": ["pw"]})
    update = api.post("/api/auth", json={"action": "update", "acceptsMarketing": "sometimes"})

    for resp in (login, register, dispatched, update):
        assert resp.status_code == 400
        assert resp.json() == {"error": "Invalid request body"}
    assert shopify.calls == []


def test_address_routes_reject_bad_bodies(api, shopify):
    api.cookies.set(CUSTOMER_COOKIE, "tok-1")

    bad_json = api.post("/api/auth/addresses", content=b"{", headers={"Content-Type": "application/json"})
    bad_type = api.put("/api/auth/addresses/addr-1", json={"city": 42})

    assert bad_json.status_code == 400
    assert bad_json.json() == {"error": "Invalid JSON body"}
    assert bad_type.status_code == 400
    assert bad_type.json() == {"error": "Invalid request body"}
    assert shopify.calls == []
