"""Administrator review queue."""

from ktmrental.services.verification import list_by_status, list_pending
from ktmrental.utils.http import (
    error_response,
    get_method,
    get_query,
    json_response,
    method_not_allowed,
    require_admin,
    run_async,
)
from ktmrental.utils.logging import correlation_context, setup_logging

setup_logging()


def handler(request):
    """
    List submissions for review.

    Defaults to pending ones; ?status=approved|rejected shows the other tabs.
    """
    if get_method(request) != "GET":
        return method_not_allowed(["GET"])

    with correlation_context():
        try:
            require_admin(request)
            status = get_query(request).get("status")
            if status:
                submissions = run_async(list_by_status(status))
            else:
                submissions = run_async(list_pending())
            return json_response(200, {"data": submissions})
        except Exception as e:
            return error_response(e)
