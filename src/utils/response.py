"""
Response Utility to Standardize API Responses

This module provides a consistent structure for API Gateway proxy responses
across the house map handlers.

Features:
- Maps standard HTTP status codes to human-readable messages.
- Returns successful payloads as-is (a house, a list of houses, a vote result).
- Wraps failures in a structured JSON error object with a readable message.
- Resolves the CORS origin for the calling front end.

Usage Example:
    ```
    from utils.response import api_response

    response = api_response(404, error_details="House not found")
    print(response)
    # {
    #     "statusCode": 404,
    #     "headers": {...},
    #     "body": '{"status": "Not Found", "code": 404, "error": "House not found"}'
    # }
    ```

The `api_response` function should be used for all API responses to enforce a standardized format.
"""

from typing import Any, Dict, List, Optional, Union
from .models import ErrorResponse
import os
import json
import logging

logger = logging.getLogger(__name__)

# Predefined status code mappings
STATUS_MESSAGES: Dict[int, str] = {
    200: "OK",
    201: "Created",
    204: "No Content",
    400: "Bad Request",
    403: "Forbidden",
    404: "Not Found",
    409: "Conflict",
    413: "Payload Too Large",
    500: "Internal Server Error",
}

ALLOWED_HEADERS = "Content-Type,X-Browser-Id,X-Amz-Date,X-Api-Key,X-Amz-Security-Token"


def get_allowed_origins() -> List[str]:
    """
    Build the list of origins allowed to call the API.

    The configured ``FRONTEND_ORIGIN`` is always allowed; outside production
    local development servers are allowed too.
    """
    env = os.getenv("ENV", "dev").lower()
    configured_frontend = os.getenv("FRONTEND_ORIGIN") or ""
    allowed: List[str] = []
    if configured_frontend:
        allowed.append(configured_frontend)
    if env != "prod":
        for port in ["3000", "3001", "5173", "8000", ""]:
            suffix = f":{port}" if port else ""
            allowed.append(f"http://localhost{suffix}")
            allowed.append(f"http://127.0.0.1{suffix}")
    return allowed


def resolve_cors_origin(request_origin: Optional[str], fallback: Optional[str] = None) -> str:
    """
    Pick the Access-Control-Allow-Origin value for a request.

    Args:
        request_origin: The ``Origin`` header sent by the browser, if any.
        fallback: Value to use when the origin is missing or not allowed.

    Returns:
        str: The origin to echo back, or the fallback.
    """
    allowed = get_allowed_origins()
    if fallback is None:
        fallback = os.getenv("FRONTEND_ORIGIN") or "http://localhost:3000"
    if request_origin:
        if request_origin in allowed:
            return request_origin
        for pat in allowed:
            if pat.startswith("https://*.") and request_origin.startswith("https://"):
                base = pat.replace("https://*.", "")
                if request_origin.endswith(f".{base}"):
                    return request_origin
    return fallback


def api_response(
    status_code: int,
    data: Optional[Union[Dict[str, Any], List[Any]]] = None,
    missing_fields: Optional[List[str]] = None,
    error_details: Optional[str] = None,
    event: Optional[Dict[str, Any]] = None,
    origin: Optional[str] = None,
) -> Dict[str, Union[int, str, Dict[str, Any]]]:
    """
    Generates a standardized API response for HTTP endpoints.

    Args:
        status_code (int): HTTP status code.
        data (Optional[Union[Dict, List]]): Payload for successful responses.
        missing_fields (Optional[List[str]]): Fields missing from request (400 only).
        error_details (Optional[str]): Human-readable reason for an error response.
        event (Optional[Dict]): The incoming event, used to read the Origin header.
        origin (Optional[str]): Explicit origin, overrides the event's header.

    Returns:
        Dict[str, Any]: API Gateway proxy response.

    Example:
        ```
        api_response(200, data={"voteScore": 2, "userVote": 1})
        # Returns:
        {
            "statusCode": 200,
            "headers": {...},
            "body": '{"voteScore": 2, "userVote": 1}'
        }
        ```
    """

    if status_code not in STATUS_MESSAGES:
        raise ValueError(f"Invalid status code: {status_code}")

    if 200 <= status_code < 300:
        body = json.dumps(data if data is not None else {}, default=str)
    else:
        error = ErrorResponse(
            status=STATUS_MESSAGES[status_code],
            code=status_code,
            error=error_details or STATUS_MESSAGES[status_code],
            missing_fields=missing_fields if missing_fields and status_code == 400 else None,
        )
        body = error.json()

    # Resolve caller origin from event if provided
    req_headers: Dict[str, Any] = {}
    if event and isinstance(event, dict):
        req_headers = event.get("headers", {}) or {}
    request_origin = origin or req_headers.get("origin") or req_headers.get("Origin")
    access_control_origin = resolve_cors_origin(request_origin)

    headers = {
        "Content-Type": "application/json",
        "Access-Control-Allow-Methods": "GET,OPTIONS,POST,DELETE",
        "Access-Control-Allow-Headers": ALLOWED_HEADERS,
        "Access-Control-Allow-Origin": access_control_origin,
    }
    logger.debug("Returning response: status=%s, resolved_origin=%s", status_code, access_control_origin)
    return {
        "statusCode": status_code,
        "headers": headers,
        "body": body,
    }
