"""
Lambda handler for voting on a house.

The browser ID travels in the body for this endpoint. A value of 1 or -1
sets the caller's vote, 0 clears it.
"""
from utils.logging_utils import get_logger
from utils import response
from utils.lambda_utils import standard_lambda_handler, extract_path_param
from houses import house_service

logger = get_logger(__name__)

@standard_lambda_handler(requires_body=True)
def lambda_handler(event: dict, _context=None, db_session=None, body=None) -> dict:
    """
    Handles casting, changing or clearing a vote.

    Args:
        event (dict): API Gateway event with the house ID in path parameters
        _context (dict): Lambda execution context (unused)
        db_session (Session, optional): SQLAlchemy session for testing
        body (dict): {"browserId": str, "value": -1 | 0 | 1}

    Returns:
        dict: API response with the updated voteScore and userVote
    """
    success, result = extract_path_param(event, "id")
    if not success:
        return result

    vote = house_service.cast_vote(db_session, result, body.get("browserId"), body.get("value"))
    return response.api_response(200, data=vote.to_payload(), event=event)
