"""Record the caller's daily login (called by the front end after sign-in)."""

from ktmrental.services.identity import record_login
from ktmrental.utils.http import (
    error_response,
    get_method,
    json_response,
    method_not_allowed,
    require_identity,
    run_async,
)
from ktmrental.utils.logging import correlation_context, setup_logging

setup_logging()


def handler(request):
    if get_method(request) != "POST":
        return method_not_allowed(["POST"])

    with correlation_context():
        try:
            identity = require_identity(request)
            recorded = run_async(record_login(identity))
            return json_response(200, {
                "ok": True,
                "recorded": recorded,
                "user_id": identity.user_id,
                "role": identity.role.value,
            })
        except Exception as e:
            return error_response(e)
