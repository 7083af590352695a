"""
Lambda Handler Utilities

This module provides standardized patterns for the house map Lambda handlers, including:
- Common error handling patterns (HouseMapError subclasses map to their HTTP status)
- Request body parsing and required-field checks
- Browser ID extraction
- Database session management
- S3 client creation

These utilities help ensure consistent behavior across all Lambda functions
and reduce code duplication.
"""

import json
import inspect
from functools import wraps
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import boto3
from sqlalchemy.exc import SQLAlchemyError

from database.database import get_db_session
from utils import response, actor_utils
from utils.errors import HouseMapError
from utils.logging_utils import get_logger

# Configure logging
logger = get_logger(__name__)

HandlerFunction = Callable[..., Dict[str, Any]]


def standard_lambda_handler(
    requires_actor: bool = False,
    requires_body: bool = False,
    required_fields: Optional[List[str]] = None
) -> Callable[[HandlerFunction], HandlerFunction]:
    """
    Decorator for standardizing Lambda handlers with common error handling patterns.

    The wrapped handler may declare any of ``event``, ``context``, ``db_session``,
    ``actor_id``, ``body`` and ``path_params``; only the ones it declares are passed.
    It can either return an API response or raise a ``HouseMapError``.

    Args:
        requires_actor: Whether the endpoint rejects requests without a browser ID
        requires_body: Whether the endpoint requires a JSON request body
        required_fields: List of required fields in the request body

    Returns:
        Decorated handler function with standardized error handling
    """
    def decorator(handler_func: HandlerFunction) -> HandlerFunction:
        @wraps(handler_func)
        def wrapper(event: Dict[str, Any], context: Dict[str, Any], **kwargs) -> Dict[str, Any]:
            function_name = handler_func.__name__

            # Log request
            http_method = event.get('httpMethod', 'UNKNOWN')
            path = event.get('path', 'UNKNOWN')
            logger.info(f"Request started: {http_method} {path} -> {function_name}")

            # Initialize database session
            db_session = kwargs.pop('db_session', None)
            session_created = False

            try:
                # Create a new session if one wasn't provided
                if db_session is None:
                    try:
                        db_session = get_db_session()
                        session_created = True
                        logger.debug(f"{function_name}: Created new database session")
                    except SQLAlchemyError as db_error:
                        logger.error(f"{function_name}: Failed to get database session: {str(db_error)}")
                        return response.api_response(500, error_details="Failed to establish database connection", event=event)

                # Browser ID is optional on most endpoints
                if requires_actor:
                    success, actor_or_response = actor_utils.require_actor_id(event)
                    if not success:
                        return actor_or_response
                    actor_id = actor_or_response
                else:
                    actor_id = actor_utils.extract_actor_id(event)

                # Process request body if required
                body_data = {}
                if requires_body:
                    success, body_or_response = parse_json_body(event)
                    if not success:
                        return body_or_response
                    body_data = body_or_response

                    # Validate required fields
                    if required_fields:
                        missing = [field for field in required_fields if field not in body_data]
                        if missing:
                            logger.warning(f"{function_name}: Missing required fields: {missing}")
                            return response.api_response(
                                400,
                                error_details="Missing required fields: {}".format(", ".join(missing)),
                                missing_fields=missing,
                                event=event,
                            )

                handler_params = {
                    'event': event,
                    'context': context,
                    'db_session': db_session,
                    'actor_id': actor_id,
                    'body': body_data,
                    'path_params': event.get("pathParameters") or {},
                }
                handler_params.update(kwargs)

                result = handler_func(**_filter_params(handler_func, handler_params))

                # Log response status code
                status_code = result.get("statusCode", 0)
                logger.info(f"Request completed: {http_method} {path} -> {function_name} (Status: {status_code})")
                return result

            except HouseMapError as e:
                logger.info(f"{function_name}: {e.__class__.__name__}: {e.message}")
                return response.api_response(
                    e.status_code,
                    error_details=e.message,
                    missing_fields=e.missing_fields,
                    event=event,
                )

            except SQLAlchemyError as db_error:
                if db_session is not None:
                    db_session.rollback()
                logger.error(f"{function_name}: Database error: {str(db_error)}")
                return response.api_response(500, error_details="Database error", event=event)

            except Exception as e:
                logger.exception(f"{function_name}: Unexpected error in Lambda handler: {str(e)}")
                return response.api_response(500, error_details="Internal server error", event=event)

            finally:
                # Close database session if we created it
                if session_created and db_session is not None:
                    try:
                        db_session.close()
                        logger.debug(f"{function_name}: Closed database session")
                    except SQLAlchemyError as e:
                        logger.error(f"{function_name}: Error closing database session: {str(e)}")

        return wrapper
    return decorator


def _filter_params(handler_func: HandlerFunction, handler_params: Dict[str, Any]) -> Dict[str, Any]:
    """Keep only the parameters the handler's signature accepts."""
    sig = inspect.signature(handler_func)
    filtered_params = {}
    for param_name, param in sig.parameters.items():
        if param_name in handler_params:
            filtered_params[param_name] = handler_params[param_name]
        elif param_name == '_event':
            filtered_params[param_name] = handler_params['event']
        elif param_name == '_context':
            filtered_params[param_name] = handler_params['context']
        elif param.kind == inspect.Parameter.VAR_KEYWORD:
            for k, v in handler_params.items():
                if k not in filtered_params:
                    filtered_params[k] = v
    return filtered_params


def parse_json_body(event: Dict[str, Any]) -> Tuple[bool, Dict[str, Any]]:
    """
    Decode the JSON request body of an event.

    Returns:
        Tuple containing success flag and either the body dict or a 400 error response
    """
    raw_body = event.get("body") or "{}"
    try:
        body_data = json.loads(raw_body)
    except (json.JSONDecodeError, TypeError):
        logger.warning("Invalid JSON in request body")
        return False, response.api_response(400, error_details="Invalid JSON in request body", event=event)

    if not isinstance(body_data, dict):
        return False, response.api_response(400, error_details="Request body must be a JSON object", event=event)
    return True, body_data


def extract_path_param(event: Dict[str, Any], param_name: str) -> Tuple[bool, Union[str, Dict[str, Any]]]:
    """
    Extract a required path parameter from the event.

    Args:
        event: API Gateway event
        param_name: Name of the path parameter

    Returns:
        Tuple containing success flag and either the parameter value or an error response
    """
    path_params = event.get("pathParameters") or {}
    param_value = path_params.get(param_name)

    if not param_value:
        logger.warning(f"Missing required path parameter: {param_name}")
        return False, response.api_response(
            400,
            error_details=f"Missing required path parameter: {param_name}",
            event=event,
        )

    return True, param_value


def get_s3_client():
    """
    Get a boto3 S3 client with standardized configuration.

    Returns:
        Configured S3 client
    """
    try:
        return boto3.client('s3')
    except Exception as e:
        logger.error(f"Failed to create S3 client: {str(e)}")
        raise
