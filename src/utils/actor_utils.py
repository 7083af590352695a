"""
Actor Identification Utilities

The map has no accounts. Each browser generates an opaque ID, keeps it in
local storage and sends it with every request; the API uses it only to
record who created a house or cast a vote. It is never verified.
"""

from typing import Optional, Tuple, Union

from utils import response
from utils.logging_utils import get_logger

logger = get_logger(__name__)

BROWSER_ID_HEADER = "x-browser-id"


def get_header(event: dict, name: str) -> Optional[str]:
    """
    Look up a request header case-insensitively.

    API Gateway passes headers through with whatever casing the client used.
    """
    headers = event.get("headers") or {}
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return None


def extract_actor_id(event: dict) -> Optional[str]:
    """
    Read the caller's browser ID from the request headers.

    Returns:
        Optional[str]: The stripped browser ID, or None if absent or blank
    """
    actor_id = get_header(event, BROWSER_ID_HEADER)
    if actor_id is None:
        return None
    actor_id = actor_id.strip()
    return actor_id or None


def require_actor_id(event: dict) -> Tuple[bool, Union[str, dict]]:
    """
    Extract the browser ID, failing when the endpoint needs one.

    Returns:
        Tuple[bool, Union[str, dict]]:
            - Success flag
            - Either the browser ID or a 400 API response
    """
    actor_id = extract_actor_id(event)
    if not actor_id:
        logger.warning("Request is missing the %s header", BROWSER_ID_HEADER)
        return False, response.api_response(400, error_details="Browser ID is required", event=event)
    return True, actor_id
