"""
Ownership and voting rules.

Pure functions that turn persisted houses and votes into the per-viewer
fields of a house projection. Nothing here touches the database.
"""
from typing import Iterable, Optional

from models import House, Vote
from utils.models import HouseView

# Houses at or below this score are hidden from everyone but their creator.
HIDE_THRESHOLD = -3


def compute_vote_score(votes: Iterable[Vote]) -> int:
    return sum(vote.value for vote in votes)


def compute_user_vote(votes: Iterable[Vote], actor_id: Optional[str]) -> Optional[int]:
    """Return the value of ``actor_id``'s vote, or None if they have not voted."""
    if not actor_id:
        return None
    for vote in votes:
        if vote.browser_id == actor_id:
            return vote.value
    return None


def compute_is_owner(house: House, actor_id: Optional[str]) -> bool:
    if not actor_id:
        return False
    return house.created_by == actor_id


def is_visible(vote_score: int, is_owner: bool, hide_threshold: int = HIDE_THRESHOLD) -> bool:
    return vote_score > hide_threshold or is_owner


def project_house(house: House, actor_id: Optional[str]) -> HouseView:
    """
    Build the view of ``house`` for the viewer identified by ``actor_id``.

    Args:
        house (House): House with its ``votes`` relationship available
        actor_id (Optional[str]): Browser ID of the viewer, may be empty

    Returns:
        HouseView: Persisted fields plus vote score, the viewer's vote and ownership flag
    """
    votes = list(house.votes)
    return HouseView(
        id=str(house.id),
        name=house.name,
        description=house.description,
        address=house.address,
        latitude=house.latitude,
        longitude=house.longitude,
        image_path=house.image_path,
        created_by=house.created_by,
        created_at=house.created_at,
        updated_at=house.updated_at,
        vote_score=compute_vote_score(votes),
        user_vote=compute_user_vote(votes, actor_id),
        is_owner=compute_is_owner(house, actor_id),
    )
