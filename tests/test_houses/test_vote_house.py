import json
import uuid

import pytest

from models import Vote
from houses.vote_house import lambda_handler


def _vote(api_gateway_event, house_id, browser_id, value):
    body = {"value": value}
    if browser_id is not None:
        body["browserId"] = browser_id
    return api_gateway_event(
        http_method="POST",
        path=f"/houses/{house_id}/vote",
        path_params={"id": str(house_id)},
        body=body,
    )


def test_upvote(test_db, api_gateway_event, seed_house):
    """Test casting a first vote"""
    house = seed_house()

    response = lambda_handler(_vote(api_gateway_event, house.id, "voter-1", 1), {}, db_session=test_db)

    assert response["statusCode"] == 200
    assert json.loads(response["body"]) == {"voteScore": 1, "userVote": 1}


def test_change_vote_replaces_previous(test_db, api_gateway_event, seed_house, seed_votes):
    """Test that a second vote from the same browser replaces the first"""
    house = seed_house()
    house_id = house.id
    seed_votes(house, [1, 1])

    lambda_handler(_vote(api_gateway_event, house_id, "voter-9", 1), {}, db_session=test_db)
    response = lambda_handler(_vote(api_gateway_event, house_id, "voter-9", -1), {}, db_session=test_db)

    assert json.loads(response["body"]) == {"voteScore": 1, "userVote": -1}
    assert test_db.query(Vote).filter(Vote.house_id == house_id, Vote.browser_id == "voter-9").count() == 1


def test_same_vote_twice_is_idempotent(test_db, api_gateway_event, seed_house):
    """Test that repeating a vote leaves one row and the same score"""
    house = seed_house()
    house_id = house.id

    first = lambda_handler(_vote(api_gateway_event, house_id, "voter-1", -1), {}, db_session=test_db)
    second = lambda_handler(_vote(api_gateway_event, house_id, "voter-1", -1), {}, db_session=test_db)

    assert json.loads(first["body"]) == json.loads(second["body"]) == {"voteScore": -1, "userVote": -1}
    assert test_db.query(Vote).filter(Vote.house_id == house_id).count() == 1


def test_clear_vote(test_db, api_gateway_event, seed_house, seed_votes):
    """Test that a value of 0 deletes the caller's vote"""
    house = seed_house()
    house_id = house.id
    seed_votes(house, [1, -1, 1])

    response = lambda_handler(_vote(api_gateway_event, house_id, "voter-0", 0), {}, db_session=test_db)

    assert json.loads(response["body"]) == {"voteScore": 0, "userVote": None}
    assert test_db.query(Vote).filter(Vote.browser_id == "voter-0").count() == 0
    assert test_db.query(Vote).count() == 2


def test_clear_without_existing_vote_is_noop(test_db, api_gateway_event, seed_house, seed_votes):
    """Test clearing a vote the caller never cast"""
    house = seed_house()
    seed_votes(house, [1, 1])

    response = lambda_handler(_vote(api_gateway_event, house.id, "newcomer", 0), {}, db_session=test_db)

    assert response["statusCode"] == 200
    assert json.loads(response["body"]) == {"voteScore": 2, "userVote": None}
    assert test_db.query(Vote).count() == 2


@pytest.mark.parametrize("value", [2, -2, "1", 1.5, True, None])
def test_invalid_vote_value(test_db, api_gateway_event, seed_house, value):
    """Test that only -1, 0 and 1 are accepted"""
    house = seed_house()

    response = lambda_handler(_vote(api_gateway_event, house.id, "voter-1", value), {}, db_session=test_db)

    assert response["statusCode"] == 400
    assert json.loads(response["body"])["error"] == "Vote value must be 1, -1, or 0"
    assert test_db.query(Vote).count() == 0


def test_vote_missing_browser_id(test_db, api_gateway_event, seed_house):
    """Test that a vote without a browser ID is rejected"""
    house = seed_house()

    response = lambda_handler(_vote(api_gateway_event, house.id, None, 1), {}, db_session=test_db)

    assert response["statusCode"] == 400
    assert json.loads(response["body"])["error"] == "Browser ID is required"


def test_vote_house_not_found(test_db, api_gateway_event):
    """Test voting on a house that does not exist"""
    response = lambda_handler(_vote(api_gateway_event, uuid.uuid4(), "voter-1", 1), {}, db_session=test_db)

    assert response["statusCode"] == 404
    assert json.loads(response["body"])["error"] == "House not found"


def test_vote_invalid_json(test_db, api_gateway_event, seed_house):
    """Test that a malformed vote body is rejected"""
    house = seed_house()
    event = api_gateway_event(http_method="POST", path_params={"id": str(house.id)}, body="[1, 2")

    response = lambda_handler(event, {}, db_session=test_db)

    assert response["statusCode"] == 400
