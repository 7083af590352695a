"""
Lambda handler for creating a new house.

The caller's browser ID (if any) is recorded as the creator, which is what
later allows that browser to delete the house.
"""
from utils.logging_utils import get_logger
from utils import response
from utils.lambda_utils import standard_lambda_handler
from houses import house_service

logger = get_logger(__name__)

@standard_lambda_handler(requires_body=True)
def lambda_handler(event: dict, _context=None, db_session=None, actor_id=None, body=None) -> dict:
    """
    Handles creating a house pinned on the map.

    Args:
        event (dict): API Gateway event
        _context (dict): Lambda execution context (unused)
        db_session (Session, optional): SQLAlchemy session for testing
        actor_id (str): Browser ID of the caller, or None (provided by decorator)
        body (dict): name, description, address, latitude, longitude, imagePath

    Returns:
        dict: 201 response with the created house, or 400 if coordinates are missing
    """
    house = house_service.create_house(
        db_session,
        actor_id,
        latitude=body.get("latitude"),
        longitude=body.get("longitude"),
        name=body.get("name"),
        description=body.get("description"),
        address=body.get("address"),
        image_path=body.get("imagePath"),
    )
    logger.info("House created successfully: %s", house.id)
    return response.api_response(201, data=house.to_payload(), event=event)
