"""Tests for the vote ledger and the vote endpoint."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from wishlist.models.feature_request import FeatureRequest
from wishlist.models.vote import Vote
from wishlist.services.catalog import FeatureNotFoundError
from wishlist.services.vote import (
    VoteOutcome,
    cast_vote,
    count_votes,
    count_votes_by_feature,
    has_voted,
    voted_feature_ids,
)


class TestVoteLedger:
    """Tests for vote service functions."""

    def test_cast_vote_records_vote(self, db: Session, test_feature: FeatureRequest):
        outcome = cast_vote(db, test_feature.id, "voter-a")
        assert outcome == VoteOutcome.RECORDED
        assert count_votes(db, test_feature.id) == 1

        vote = db.query(Vote).filter(Vote.feature_id == test_feature.id).one()
        assert vote.voter_id == "voter-a"
        assert vote.voted_at is not None

    def test_cast_vote_twice_is_idempotent(self, db: Session, test_feature: FeatureRequest):
        cast_vote(db, test_feature.id, "voter-a")
        outcome = cast_vote(db, test_feature.id, "voter-a")
        assert outcome == VoteOutcome.ALREADY_VOTED
        assert db.query(Vote).count() == 1

    def test_distinct_voters_each_count(self, db: Session, test_feature: FeatureRequest):
        for voter in ("voter-a", "voter-b", "voter-c"):
            assert cast_vote(db, test_feature.id, voter) == VoteOutcome.RECORDED
        assert count_votes(db, test_feature.id) == 3

    def test_votes_do_not_leak_across_features(self, db: Session, make_feature):
        first = make_feature(title="First")
        second = make_feature(title="Second")
        cast_vote(db, first.id, "voter-a")
        cast_vote(db, first.id, "voter-b")
        cast_vote(db, second.id, "voter-a")

        assert count_votes(db, first.id) == 2
        assert count_votes(db, second.id) == 1

    def test_cast_vote_feature_not_found(self, db: Session):
        with pytest.raises(FeatureNotFoundError):
            cast_vote(db, 99999, "voter-a")
        assert db.query(Vote).count() == 0

    def test_cast_vote_requires_voter_id(self, db: Session, test_feature: FeatureRequest):
        with pytest.raises(ValueError):
            cast_vote(db, test_feature.id, "")

    def test_unique_constraint_settles_concurrent_duplicate(
        self, db: Session, test_feature: FeatureRequest, monkeypatch
    ):
        """A racing request that passed the lookup still cannot store a second vote."""
        cast_vote(db, test_feature.id, "voter-a")
        monkeypatch.setattr("wishlist.services.vote._find_vote", lambda *args: None)

        outcome = cast_vote(db, test_feature.id, "voter-a")

        assert outcome == VoteOutcome.ALREADY_VOTED
        assert count_votes(db, test_feature.id) == 1

    def test_count_votes_unknown_feature_is_zero(self, db: Session):
        assert count_votes(db, 99999) == 0

    def test_count_votes_by_feature_includes_zero_counts(self, db: Session, make_feature):
        voted = make_feature(title="Voted")
        quiet = make_feature(title="Quiet")
        cast_vote(db, voted.id, "voter-a")

        counts = count_votes_by_feature(db, [voted.id, quiet.id])
        assert counts == {voted.id: 1, quiet.id: 0}

    def test_count_votes_by_feature_empty_ids(self, db: Session):
        assert count_votes_by_feature(db, []) == {}

    def test_has_voted(self, db: Session, test_feature: FeatureRequest):
        assert has_voted(db, test_feature.id, "voter-a") is False
        cast_vote(db, test_feature.id, "voter-a")
        assert has_voted(db, test_feature.id, "voter-a") is True
        assert has_voted(db, test_feature.id, "voter-b") is False

    def test_voted_feature_ids(self, db: Session, make_feature):
        first = make_feature(title="First")
        second = make_feature(title="Second")
        make_feature(title="Third")
        cast_vote(db, first.id, "voter-a")
        cast_vote(db, second.id, "voter-a")
        cast_vote(db, second.id, "voter-b")

        assert voted_feature_ids(db, "voter-a") == {first.id, second.id}
        assert voted_feature_ids(db, "nobody") == set()


class TestVoteEndpoint:
    """Tests for POST /api/features/{id}/vote."""

    def test_vote_requires_login(self, client: TestClient, test_feature: FeatureRequest):
        response = client.post(f"/api/features/{test_feature.id}/vote")
        assert response.status_code == 401

    def test_vote_success(
        self, client: TestClient, auth_headers: dict, test_feature: FeatureRequest
    ):
        response = client.post(f"/api/features/{test_feature.id}/vote", headers=auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "voted"
        assert data["vote_count"] == 1
        assert data["has_voted"] is True

    def test_first_vote_issues_voter_cookie(
        self, client: TestClient, auth_headers: dict, test_feature: FeatureRequest
    ):
        response = client.post(f"/api/features/{test_feature.id}/vote", headers=auth_headers)
        assert response.cookies.get("voter-id")

        set_cookie = response.headers["set-cookie"]
        assert "Max-Age=31536000" in set_cookie
        assert "Path=/" in set_cookie

    def test_second_vote_reuses_cookie_and_is_rejected(
        self, client: TestClient, auth_headers: dict, test_feature: FeatureRequest
    ):
        first = client.post(f"/api/features/{test_feature.id}/vote", headers=auth_headers)
        voter_id = first.cookies.get("voter-id")

        second = client.post(f"/api/features/{test_feature.id}/vote", headers=auth_headers)
        assert second.status_code == 200
        data = second.json()
        assert data["status"] == "already_voted"
        assert data["message"] == "You have already voted for this feature."
        assert data["vote_count"] == 1
        # No new id minted: the stored cookie was sent back and reused
        assert "set-cookie" not in second.headers
        assert voter_id

    def test_new_browser_gets_its_own_vote(
        self, client: TestClient, auth_headers: dict, test_feature: FeatureRequest
    ):
        client.post(f"/api/features/{test_feature.id}/vote", headers=auth_headers)
        client.cookies.clear()

        response = client.post(f"/api/features/{test_feature.id}/vote", headers=auth_headers)
        assert response.json()["status"] == "voted"
        assert response.json()["vote_count"] == 2

    def test_malformed_cookie_is_replaced(
        self, client: TestClient, auth_headers: dict, test_feature: FeatureRequest
    ):
        client.cookies.set("voter-id", "x" * 100)
        response = client.post(f"/api/features/{test_feature.id}/vote", headers=auth_headers)
        assert response.status_code == 200
        new_id = response.cookies.get("voter-id")
        assert new_id
        assert new_id != "x" * 100

    def test_vote_feature_not_found(self, client: TestClient, auth_headers: dict):
        response = client.post("/api/features/99999/vote", headers=auth_headers)
        assert response.status_code == 404
        assert response.json()["detail"] == "Feature not found"

    def test_vote_invalid_id(self, client: TestClient, auth_headers: dict):
        response = client.post("/api/features/0/vote", headers=auth_headers)
        assert response.status_code == 422
