"""
Lambda handler for listing houses on the map.

Returns every house the caller may see, newest first, each with its vote
score, the caller's own vote and whether the caller created it.
"""
from utils.logging_utils import get_logger
from utils import response
from utils.lambda_utils import standard_lambda_handler
from houses import house_service

logger = get_logger(__name__)

@standard_lambda_handler()
def lambda_handler(event: dict, _context=None, db_session=None, actor_id=None) -> dict:
    """
    Handles listing houses for the map.

    Args:
        event (dict): API Gateway event; the X-Browser-Id header is optional
        _context (dict): Lambda execution context (unused)
        db_session (Session, optional): SQLAlchemy session for testing
        actor_id (str): Browser ID of the caller, or None (provided by decorator)

    Returns:
        dict: API response containing a JSON array of house projections
    """
    houses = house_service.list_houses(db_session, actor_id)
    return response.api_response(200, data=[house.to_payload() for house in houses], event=event)
