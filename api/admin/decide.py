"""Approve or reject a submission."""

from ktmrental.services.verification import decide
from ktmrental.utils.http import (
    error_response,
    get_method,
    json_response,
    method_not_allowed,
    parse_json_body,
    require_identity,
    require_param,
    run_async,
)
from ktmrental.utils.logging import correlation_context, setup_logging

setup_logging()


def handler(request):
    """POST {"id": ..., "decision": "approve" | "reject"}."""
    if get_method(request) != "POST":
        return method_not_allowed(["POST"])

    with correlation_context():
        try:
            identity = require_identity(request)
            data = parse_json_body(request)
            submission = run_async(decide(
                require_param(data, "id"),
                require_param(data, "decision"),
                identity.role,
            ))
            return json_response(200, {"data": submission})
        except Exception as e:
            return error_response(e)
