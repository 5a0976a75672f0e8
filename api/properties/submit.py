"""Submit a property for administrator verification."""

from ktmrental.services.verification import submit
from ktmrental.utils.http import (
    error_response,
    get_method,
    json_response,
    method_not_allowed,
    parse_json_body,
    require_identity,
    run_async,
)
from ktmrental.utils.logging import correlation_context, setup_logging

setup_logging()


def handler(request):
    """POST a property body; responds 201 with the pending submission."""
    if get_method(request) != "POST":
        return method_not_allowed(["POST"])

    with correlation_context():
        try:
            identity = require_identity(request)
            data = parse_json_body(request)
            submission = run_async(submit(data, identity.user_id))
            return json_response(201, {"data": submission})
        except Exception as e:
            return error_response(e)
