"""
Business logic for houses and votes.

Each function is one stateless transaction against the store. The browser
ID of the caller is passed explicitly; it is trusted only as far as saying
who created a house or cast a vote. Failures are raised as
``utils.errors`` exceptions and turned into HTTP responses by the handler
decorator.
"""
import math
import uuid
from datetime import datetime, timezone
from typing import Any, List, Optional

from sqlalchemy.orm import Session, selectinload
from sqlalchemy.exc import SQLAlchemyError

from models import House, Vote
from utils.errors import ForbiddenError, NotFoundError, ValidationError
from utils.logging_utils import get_logger, log_structured, LogLevel
from utils.models import HouseView, VoteResult
from utils.voting import compute_user_vote, compute_vote_score, is_visible, project_house

logger = get_logger(__name__)

VALID_VOTE_VALUES = (-1, 0, 1)


def list_houses(db_session: Session, actor_id: Optional[str]) -> List[HouseView]:
    """
    List every house visible to the viewer, newest first.

    Houses whose score has fallen to the hide threshold are dropped unless
    the viewer created them.
    """
    houses = (
        db_session.query(House)
        .options(selectinload(House.votes))
        .order_by(House.created_at.desc())
        .all()
    )
    views = [project_house(house, actor_id) for house in houses]
    visible = [view for view in views if is_visible(view.vote_score, view.is_owner)]
    logger.info("Listing %s of %s houses", len(visible), len(views))
    return visible


def _parse_coordinate(value: Any, field_name: str) -> float:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    # inf cannot be written as JSON and NaN is stored as NULL
    if not math.isfinite(parsed):
        raise ValidationError(f"{field_name} must be a number")
    return parsed


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = str(value)
    return value if value.strip() else None


def derive_house_name(name: Optional[str], address: Optional[str], latitude: float, longitude: float) -> str:
    """
    Pick a display name: the given name, else the address, else the coordinates.

    >>> derive_house_name("", "5 Oak St", 29.9511, -90.0715)
    '5 Oak St'
    >>> derive_house_name(None, "  ", 29.9511, -90.0715)
    'House at 29.9511, -90.0715'
    """
    for candidate in (name, address):
        if candidate and str(candidate).strip():
            return str(candidate).strip()
    return f"House at {latitude:.4f}, {longitude:.4f}"


def create_house(
    db_session: Session,
    actor_id: Optional[str],
    latitude: Any,
    longitude: Any,
    name: Optional[str] = None,
    description: Optional[str] = None,
    address: Optional[str] = None,
    image_path: Optional[str] = None,
) -> HouseView:
    """
    Create a house pinned by ``actor_id``.

    Raises:
        ValidationError: If latitude or longitude is missing or not numeric
    """
    if latitude is None or longitude is None:
        missing = [field for field, value in (("latitude", latitude), ("longitude", longitude)) if value is None]
        raise ValidationError("Latitude and longitude are required", missing_fields=missing)

    lat = _parse_coordinate(latitude, "latitude")
    lng = _parse_coordinate(longitude, "longitude")

    house = House(
        name=derive_house_name(name, address, lat, lng),
        description=_blank_to_none(description),
        address=_blank_to_none(address),
        latitude=lat,
        longitude=lng,
        image_path=_blank_to_none(image_path),
        created_by=actor_id or None,
    )
    try:
        db_session.add(house)
        db_session.commit()
    except SQLAlchemyError:
        db_session.rollback()
        raise

    log_structured(logger, LogLevel.INFO, "House created", house_id=str(house.id), created_by=house.created_by)

    # The creator always sees their own new house as owner, with no votes yet.
    view = project_house(house, actor_id)
    return view.model_copy(update={"vote_score": 0, "user_vote": None, "is_owner": True})


def _get_house(db_session: Session, house_id: Any) -> House:
    """Load a house by id; malformed ids are treated like unknown ones."""
    try:
        house_uuid = house_id if isinstance(house_id, uuid.UUID) else uuid.UUID(str(house_id))
    except ValueError:
        raise NotFoundError("House not found")

    house = db_session.query(House).filter(House.id == house_uuid).first()
    if not house:
        raise NotFoundError("House not found")
    return house


def delete_house(db_session: Session, house_id: Any, actor_id: Optional[str]) -> None:
    """
    Delete a house created by ``actor_id``, along with its votes.

    Raises:
        NotFoundError: If no house has that id
        ForbiddenError: If the caller did not create the house (ownerless houses included)
    """
    house = _get_house(db_session, house_id)

    if house.created_by is None or house.created_by != actor_id:
        log_structured(logger, LogLevel.WARNING, "Delete refused for non-owner", house_id=str(house.id), browser_id=actor_id)
        raise ForbiddenError("You can only delete houses you created")

    try:
        db_session.delete(house)
        db_session.commit()
    except SQLAlchemyError:
        db_session.rollback()
        raise

    log_structured(logger, LogLevel.INFO, "House deleted", house_id=str(house_id), browser_id=actor_id)


def _validate_vote_value(value: Any) -> int:
    # bool is an int subclass; True must not count as an upvote.
    if isinstance(value, bool) or not isinstance(value, int) or value not in VALID_VOTE_VALUES:
        raise ValidationError("Vote value must be 1, -1, or 0")
    return value


def _upsert_vote(db_session: Session, house_id: uuid.UUID, actor_id: str, value: int) -> None:
    """Insert the vote or replace the value of the caller's existing one."""
    dialect = db_session.get_bind().dialect.name
    now = datetime.now(timezone.utc)

    if dialect in ("postgresql", "sqlite"):
        if dialect == "postgresql":
            from sqlalchemy.dialects.postgresql import insert
        else:
            from sqlalchemy.dialects.sqlite import insert

        stmt = insert(Vote).values(house_id=house_id, browser_id=actor_id, value=value)
        stmt = stmt.on_conflict_do_update(
            index_elements=[Vote.house_id, Vote.browser_id],
            set_={"value": stmt.excluded.value, "updated_at": now},
        )
        db_session.execute(stmt)
        return

    existing = db_session.query(Vote).filter(Vote.house_id == house_id, Vote.browser_id == actor_id).first()
    if existing:
        existing.value = value
        existing.updated_at = now
    else:
        db_session.add(Vote(house_id=house_id, browser_id=actor_id, value=value))


def cast_vote(db_session: Session, house_id: Any, actor_id: Optional[str], value: Any) -> VoteResult:
    """
    Record, replace or clear the caller's vote on a house.

    A value of 0 removes the caller's vote instead of storing a neutral one.

    Returns:
        VoteResult: The recomputed score and the caller's current vote

    Raises:
        ValidationError: If the browser ID is missing or the value is not -1, 0 or 1
        NotFoundError: If the house does not exist
    """
    if not actor_id:
        raise ValidationError("Browser ID is required")
    vote_value = _validate_vote_value(value)

    house = _get_house(db_session, house_id)

    try:
        if vote_value == 0:
            db_session.query(Vote).filter(
                Vote.house_id == house.id,
                Vote.browser_id == actor_id,
            ).delete(synchronize_session="fetch")
        else:
            _upsert_vote(db_session, house.id, actor_id, vote_value)
        db_session.commit()
    except SQLAlchemyError:
        db_session.rollback()
        raise

    votes = db_session.query(Vote).filter(Vote.house_id == house.id).all()
    result = VoteResult(
        vote_score=compute_vote_score(votes),
        user_vote=compute_user_vote(votes, actor_id),
    )
    log_structured(
        logger, LogLevel.INFO, "Vote recorded",
        house_id=str(house.id), browser_id=actor_id, value=vote_value, vote_score=result.vote_score,
    )
    return result
