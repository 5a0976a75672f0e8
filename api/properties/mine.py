"""The caller's submissions with per-status counts (owner dashboard)."""

from ktmrental.services.verification import count_by_status, list_by_owner
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
    if get_method(request) != "GET":
        return method_not_allowed(["GET"])

    with correlation_context():
        try:
            identity = require_identity(request)
            submissions = run_async(list_by_owner(identity.user_id))
            return json_response(200, {
                "data": submissions,
                "counts": count_by_status(submissions),
            })
        except Exception as e:
            return error_response(e)
