"""Owner management of published rooms."""

from ktmrental.services import listing_store
from ktmrental.utils.http import (
    error_response,
    get_method,
    get_query,
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
    """
    PATCH ?id=... with a partial body (e.g. {"available": false}) updates the
    caller's own room. DELETE ?id=... removes it; administrators may delete
    any room.
    """
    method = get_method(request)
    if method not in ("PATCH", "DELETE"):
        return method_not_allowed(["PATCH", "DELETE"])

    with correlation_context():
        try:
            identity = require_identity(request)
            listing_id = require_param(get_query(request), "id")

            if method == "PATCH":
                listing = run_async(listing_store.update_listing(
                    listing_id,
                    parse_json_body(request),
                    caller_id=identity.user_id,
                ))
                return json_response(200, {"data": listing})

            caller_id = None if identity.is_admin else identity.user_id
            run_async(listing_store.delete_listing(listing_id, caller_id=caller_id))
            return json_response(200, {"success": True})
        except Exception as e:
            return error_response(e)
