"""
Customer session endpoints.

- POST /auth/login, POST /auth/register: per-action routes
- POST /auth: dispatch keyed by ``action``
- GET /auth: current session
- /auth/addresses: address book of the signed-in customer

Status mapping: user errors (and the not-logged-in precondition) -> 400 with
the first message, raised failures -> 500, success -> 200.
"""

import json
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Type

from fastapi import APIRouter, Depends, Request, Response
from pydantic import BaseModel, ValidationError

from storefront.api.dependencies import get_customer_service, get_error_handler
from storefront.error_handler import ErrorHandler
from storefront.integrations.contracts.shopify import first_error_message
from storefront.integrations.policy.customer_service import CustomerService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])

REGISTER_FIELDS = ("email", "password", "firstName", "lastName", "phone", "acceptsMarketing")
UPDATE_FIELDS = ("firstName", "lastName", "email", "password", "phone", "acceptsMarketing")
ADDRESS_FIELDS = ("address1", "address2", "city", "company", "country", "firstName", "lastName", "phone", "province", "zip")


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class RegisterRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    phone: Optional[str] = None
    acceptsMarketing: Optional[bool] = None


class AddressRequest(BaseModel):
    address1: Optional[str] = None
    address2: Optional[str] = None
    city: Optional[str] = None
    company: Optional[str] = None
    country: Optional[str] = None
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    phone: Optional[str] = None
    province: Optional[str] = None
    zip: Optional[str] = None


def _fail(response: Response, status_code: int, message: str, **extra: Any) -> Dict[str, Any]:
    response.status_code = status_code
    return {"error": message, **extra}


def _user_errors(response: Response, result: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    errors = result.get("errors")
    if errors:
        return _fail(response, 400, first_error_message(errors), errors=errors)
    return None


def _pick_present(params: Dict[str, Any], fields) -> Dict[str, Any]:
    return {name: params[name] for name in fields if params.get(name) is not None}


async def _read_json_object(request: Request) -> Optional[Dict[str, Any]]:
    """Decoded JSON object body; an empty body counts as ``{}``. None when undecodable."""
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


def _validated(model: Type[BaseModel], params: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    try:
        return model.model_validate(params).model_dump()
    except ValidationError as e:
        logger.info("Rejected auth payload: %s", e.errors(include_input=False))
        return None


# --- Action handlers (shared by the per-action routes and the dispatch route) ---


async def _login(service: CustomerService, response: Response, params: Dict[str, Any]) -> Dict[str, Any]:
    fields = _validated(LoginRequest, params)
    if fields is None:
        return _fail(response, 400, "Invalid request body")
    email, password = fields["email"], fields["password"]
    if not email or not password:
        return _fail(response, 400, "Email and password are required")

    result = await service.login_customer(email, password)
    failed = _user_errors(response, result)
    if failed:
        return failed
    return {"success": True, "accessToken": result["accessToken"], "expiresAt": result["expiresAt"]}


async def _register(service: CustomerService, response: Response, params: Dict[str, Any]) -> Dict[str, Any]:
    fields = _validated(RegisterRequest, params)
    if fields is None:
        return _fail(response, 400, "Invalid request body")
    if not fields["email"] or not fields["password"]:
        return _fail(response, 400, "Email and password are required")

    result = await service.create_customer(_pick_present(fields, REGISTER_FIELDS))
    failed = _user_errors(response, result)
    if failed:
        return failed
    customer = result.get("customer") or {}
    return {"success": True, "customerId": customer.get("id"), "customer": customer}


async def _update(service: CustomerService, response: Response, params: Dict[str, Any]) -> Dict[str, Any]:
    fields = _validated(RegisterRequest, params)
    if fields is None:
        return _fail(response, 400, "Invalid request body")

    result = await service.update_customer(_pick_present(fields, UPDATE_FIELDS))
    failed = _user_errors(response, result)
    if failed:
        return failed
    return {"success": True, "customer": result.get("customer")}


async def _logout(service: CustomerService, response: Response, params: Dict[str, Any]) -> Dict[str, Any]:
    # The cookie is cleared even when the remote revoke fails.
    revoked = await service.logout_customer()
    return {"success": True, "revoked": revoked}


async def _recover(service: CustomerService, response: Response, params: Dict[str, Any]) -> Dict[str, Any]:
    email = params.get("email")
    if not isinstance(email, str) or not email:
        return _fail(response, 400, "Email is required")

    result = await service.recover_customer(email)
    failed = _user_errors(response, result)
    if failed:
        return failed
    return {"success": True}


Action = Callable[[CustomerService, Response, Dict[str, Any]], Awaitable[Dict[str, Any]]]

ACTIONS: Dict[str, Action] = {
    "login": _login,
    "register": _register,
    "update": _update,
    "logout": _logout,
    "recover": _recover,
}

FALLBACK_MESSAGES = {
    "login": "Login failed",
    "register": "Registration failed",
    "update": "Update failed",
    "logout": "Logout failed",
    "recover": "Password recovery failed",
}


async def _run_action(
    action: str,
    params: Dict[str, Any],
    service: CustomerService,
    response: Response,
    errors: ErrorHandler,
) -> Dict[str, Any]:
    try:
        return await ACTIONS[action](service, response, params)
    except Exception as e:
        response.status_code = 500
        return errors.handle_exception(e, FALLBACK_MESSAGES[action], context={"action": action})


# --- Routes -------------------------------------------------------------------


@router.post("/login")
async def login(
    request: Request,
    response: Response,
    service: CustomerService = Depends(get_customer_service),
    errors: ErrorHandler = Depends(get_error_handler),
):
    params = await _read_json_object(request)
    if params is None:
        return _fail(response, 400, "Invalid JSON body")
    return await _run_action("login", params, service, response, errors)


@router.post("/register")
async def register(
    request: Request,
    response: Response,
    service: CustomerService = Depends(get_customer_service),
    errors: ErrorHandler = Depends(get_error_handler),
):
    params = await _read_json_object(request)
    if params is None:
        return _fail(response, 400, "Invalid JSON body")
    return await _run_action("register", params, service, response, errors)


@router.post("")
async def dispatch(
    request: Request,
    response: Response,
    service: CustomerService = Depends(get_customer_service),
    errors: ErrorHandler = Depends(get_error_handler),
):
    """Single entry point keyed by ``action`` (login | register | update | logout | recover)."""
    data = await _read_json_object(request)
    if data is None:
        return _fail(response, 400, "Invalid JSON body")

    action = data.pop("action", None)
    if action not in ACTIONS:
        logger.info("Rejected auth action: %r", action)
        return _fail(response, 400, "Invalid action")

    return await _run_action(action, data, service, response, errors)


@router.get("")
async def get_session(
    response: Response,
    service: CustomerService = Depends(get_customer_service),
    errors: ErrorHandler = Depends(get_error_handler),
):
    try:
        customer = await service.get_customer()
    except Exception as e:
        response.status_code = 500
        return {**errors.handle_exception(e, "Failed to get customer"), "customer": None}
    return {"customer": customer}


# --- Address book -------------------------------------------------------------


@router.post("/addresses")
async def create_address(
    request: Request,
    response: Response,
    service: CustomerService = Depends(get_customer_service),
    errors: ErrorHandler = Depends(get_error_handler),
):
    params = await _read_json_object(request)
    if params is None:
        return _fail(response, 400, "Invalid JSON body")
    address = _validated(AddressRequest, params)
    if address is None:
        return _fail(response, 400, "Invalid request body")
    try:
        result = await service.create_customer_address(_pick_present(address, ADDRESS_FIELDS))
    except Exception as e:
        response.status_code = 500
        return errors.handle_exception(e, "Failed to create address")
    return _user_errors(response, result) or {"success": True, "customerAddress": result.get("customerAddress")}


@router.put("/addresses/{address_id:path}")
async def update_address(
    address_id: str,
    request: Request,
    response: Response,
    service: CustomerService = Depends(get_customer_service),
    errors: ErrorHandler = Depends(get_error_handler),
):
    params = await _read_json_object(request)
    if params is None:
        return _fail(response, 400, "Invalid JSON body")
    address = _validated(AddressRequest, params)
    if address is None:
        return _fail(response, 400, "Invalid request body")
    try:
        result = await service.update_customer_address(address_id, _pick_present(address, ADDRESS_FIELDS))
    except Exception as e:
        response.status_code = 500
        return errors.handle_exception(e, "Failed to update address")
    return _user_errors(response, result) or {"success": True, "customerAddress": result.get("customerAddress")}


@router.delete("/addresses/{address_id:path}")
async def delete_address(
    address_id: str,
    response: Response,
    service: CustomerService = Depends(get_customer_service),
    errors: ErrorHandler = Depends(get_error_handler),
):
    try:
        result = await service.delete_customer_address(address_id)
    except Exception as e:
        response.status_code = 500
        return errors.handle_exception(e, "Failed to delete address")
    return _user_errors(response, result) or {"success": True}
