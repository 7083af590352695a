import json

from utils.logging_utils import get_logger
from utils.response import ALLOWED_HEADERS, resolve_cors_origin

logger = get_logger(__name__)


def lambda_handler(event, context):
    """
    Handles preflight requests for API Gateway.
    """
    headers = event.get('headers', {}) or {}
    origin = headers.get('origin') or headers.get('Origin')
    path = event.get('path', 'unknown path')

    # No origin means a non-browser caller; answer with a wildcard
    access_control_origin = resolve_cors_origin(origin, fallback="*")
    logger.info("Preflight request from %s for %s, allowing %s", origin, path, access_control_origin)

    return {
        "statusCode": 200,
        "headers": {
            "Access-Control-Allow-Origin": access_control_origin,
            "Access-Control-Allow-Methods": "OPTIONS,POST,GET,DELETE",
            "Access-Control-Allow-Headers": ALLOWED_HEADERS,
            "Access-Control-Max-Age": "7200",  # Cache preflight response for 2 hours
        },
        "body": json.dumps({
            "path": path,
            "origin_allowed": origin == access_control_origin if origin else True,
        })
    }
