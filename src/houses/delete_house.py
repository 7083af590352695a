"""
Lambda handler for deleting a house.

Only the browser that created a house may delete it; its votes are removed
with it.
"""
from utils.logging_utils import get_logger
from utils import response
from utils.lambda_utils import standard_lambda_handler, extract_path_param
from houses import house_service

logger = get_logger(__name__)

@standard_lambda_handler(requires_actor=True)
def lambda_handler(event: dict, _context=None, db_session=None, actor_id=None) -> dict:
    """
    Handles deleting a house owned by the caller.

    Args:
        event (dict): API Gateway event with the house ID in path parameters
        _context (dict): Lambda execution context (unused)
        db_session (Session, optional): SQLAlchemy session for testing
        actor_id (str): Browser ID of the caller (provided by decorator)

    Returns:
        dict: 200 on success, 403 if the caller is not the creator, 404 if not found
    """
    success, result = extract_path_param(event, "id")
    if not success:
        return result  # Return error response

    house_service.delete_house(db_session, result, actor_id)
    return response.api_response(200, data={"success": True}, event=event)
