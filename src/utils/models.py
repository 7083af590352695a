"""
Models for API Payloads

This module defines the JSON shapes returned by the house map API.
Successful responses carry the payload itself (a house projection, a list
of them, or a vote result); error responses use ``ErrorResponse``.

Features:
- Uses Pydantic for validation and serialization.
- Serializes field names in camelCase, the shape the map front end reads.
- Overrides `.json()` on ``ErrorResponse`` to exclude `None` values for cleaner responses.

Example Usage:
    ```
    from utils.models import VoteResult

    result = VoteResult(vote_score=3, user_vote=1)

    print(result.model_dump(by_alias=True))
    # {"voteScore": 3, "userVote": 1}
    ```
"""

from datetime import datetime, timezone
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model that reads snake_case and writes camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> dict:
        """
        Convert the model to a JSON-ready dictionary using camelCase keys.

        Returns:
            dict: Serialized payload.
        """
        return self.model_dump(mode="json", by_alias=True)


class HouseView(CamelModel):
    """
    A house as seen by one viewer.

    Attributes:
        vote_score (int): Sum of all votes on the house.
        user_vote (Optional[int]): The viewer's own vote, if any.
        is_owner (bool): Whether the viewer created the house.
    """

    id: str
    name: str
    description: Optional[str] = None
    address: Optional[str] = None
    latitude: float
    longitude: float
    image_path: Optional[str] = None
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    vote_score: int = 0
    user_vote: Optional[int] = None
    is_owner: bool = False

    @field_validator("created_at", "updated_at")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        """The store keeps naive UTC timestamps; mark them as UTC so the JSON carries an offset."""
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class VoteResult(CamelModel):
    """Score and caller vote after a vote request."""

    vote_score: int
    user_vote: Optional[int] = None


class ErrorResponse(BaseModel):
    """
    Standardized error response model.

    Attributes:
        status (str): Human-readable status message (e.g., "Bad Request").
        code (int): HTTP status code.
        error (str): A descriptive message explaining the failure.
        missing_fields (Optional[List[str]]): Request fields that were absent.
    """

    status: str
    code: int
    error: str
    missing_fields: Optional[List[str]] = None

    def json(self, **kwargs):
        """
        Convert the error response to a JSON string while ensuring `None` values are excluded.

        Returns:
            str: JSON-serialized error response.
        """
        return super().model_dump_json(**kwargs, exclude_none=True)
