"""Helpers shared by the serverless request handlers in api/."""

import asyncio
import json
from typing import Any, Coroutine, Optional

from pydantic import BaseModel

from ktmrental.models.identity import Identity
from ktmrental.services.identity import resolve_identity
from ktmrental.utils.errors import (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    InvalidTransitionError,
    NotFoundError,
    PersistenceError,
    RentalError,
    UploadError,
    ValidationError,
)
from ktmrental.utils.logging import get_structured_logger, mask_sensitive_data

logger = get_structured_logger(__name__)

JSON_HEADERS = {"Content-Type": "application/json"}

# Most specific first
_STATUS_CODES: list[tuple[type, int]] = [
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (ValidationError, 400),
    (NotFoundError, 404),
    (InvalidTransitionError, 409),
    (PersistenceError, 502),
    (UploadError, 502),
    (ConfigurationError, 500),
]


def _to_jsonable(payload: Any) -> Any:
    if isinstance(payload, BaseModel):
        return payload.model_dump(mode="json")
    if isinstance(payload, (list, tuple)):
        return [_to_jsonable(item) for item in payload]
    if isinstance(payload, dict):
        return {key: _to_jsonable(value) for key, value in payload.items()}
    return payload


def json_response(status_code: int, payload: Any) -> dict:
    return {
        "statusCode": status_code,
        "headers": dict(JSON_HEADERS),
        "body": json.dumps(_to_jsonable(payload)),
    }


def status_code_for(error: Exception) -> int:
    for error_type, status_code in _STATUS_CODES:
        if isinstance(error, error_type):
            return status_code
    return 500


def error_response(error: Exception) -> dict:
    """Convert an exception into an {"error": message} response."""
    status_code = status_code_for(error)
    if status_code >= 500:
        logger.error(
            "Request failed",
            error=mask_sensitive_data(str(error)),
            error_type=type(error).__name__,
            status_code=status_code,
        )
    # Internal details of unexpected errors are not returned to the caller
    message = str(error) if isinstance(error, RentalError) else "Internal server error"
    return json_response(status_code, {"error": message})


def method_not_allowed(allowed: list[str]) -> dict:
    response = json_response(405, {"error": f"Method not allowed (use {', '.join(allowed)})"})
    response["headers"]["Allow"] = ", ".join(allowed)
    return response


def get_method(request: dict) -> str:
    return (request.get("method") or "GET").upper()


def get_query(request: dict) -> dict:
    return request.get("query") or {}


def parse_json_body(request: dict) -> dict:
    """Decode the JSON object body of a request."""
    body = request.get("body")
    if body is None or body == "":
        return {}
    if isinstance(body, dict):
        return body
    if isinstance(body, bytes):
        body = body.decode("utf-8")
    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Request body is not valid JSON: {e}")
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def require_identity(request: dict) -> Identity:
    """Identity of the caller, from the claims attached by the auth integration."""
    identity = resolve_identity(request.get("auth"))
    if identity is None:
        raise AuthenticationError("Authentication required")
    return identity


def require_admin(request: dict) -> Identity:
    identity = require_identity(request)
    if not identity.is_admin:
        raise AuthorizationError("Administrator access required")
    return identity


def require_param(data: dict, name: str) -> str:
    value = data.get(name)
    if value is None or str(value).strip() == "":
        raise ValidationError(f"Missing required parameter: {name}")
    return str(value)


def parse_float(value: Optional[str], name: str) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be a number")


def run_async(coro: Coroutine) -> Any:
    """Run a coroutine from a synchronous serverless handler."""
    return asyncio.run(coro)
