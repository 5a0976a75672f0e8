"""Delete a submission. Owners delete their own; administrators delete any."""

from ktmrental.services.verification import remove
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
    if get_method(request) not in ("POST", "DELETE"):
        return method_not_allowed(["POST", "DELETE"])

    with correlation_context():
        try:
            identity = require_identity(request)
            params = {**(request.get("query") or {}), **parse_json_body(request)}
            submission_id = require_param(params, "id")

            caller_id = None if identity.is_admin else identity.user_id
            run_async(remove(submission_id, caller_id=caller_id))
            return json_response(200, {"success": True})
        except Exception as e:
            return error_response(e)
