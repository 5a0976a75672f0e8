"""Test helper functions."""

import json
from typing import Any, Dict, Optional


def create_vercel_request(
    method: str = "GET",
    path: str = "/api",
    body: Any = None,
    query: Optional[Dict[str, str]] = None,
    auth: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Create a Vercel request object for testing."""
    return {
        "method": method,
        "path": path,
        "headers": {"content-type": "application/json"},
        "body": json.dumps(body) if isinstance(body, (dict, list)) else body,
        "query": query or {},
        "auth": auth,
    }


def response_json(response: Dict[str, Any]) -> Any:
    return json.loads(response["body"])
