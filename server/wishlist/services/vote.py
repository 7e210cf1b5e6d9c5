"""Vote ledger: one vote per (feature, voter) and on-demand vote counts."""

import logging
from collections.abc import Iterable
from enum import Enum

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from wishlist.core.time import utcnow
from wishlist.models.vote import Vote
from wishlist.services.catalog import FeatureNotFoundError, get_feature

logger = logging.getLogger(__name__)


class VoteOutcome(str, Enum):
    RECORDED = "voted"
    ALREADY_VOTED = "already_voted"


def _find_vote(db: Session, feature_id: int, voter_id: str) -> Vote | None:
    return (
        db.query(Vote)
        .filter(
            Vote.feature_id == feature_id,
            Vote.voter_id == voter_id,
        )
        .first()
    )


def cast_vote(db: Session, feature_id: int, voter_id: str) -> VoteOutcome:
    """
    Record a vote for a feature.
    Idempotent: a voter who already voted gets ALREADY_VOTED and nothing is written.
    The unique constraint on (feature_id, voter_id) settles concurrent duplicates.
    """
    if not voter_id:
        raise ValueError("voter_id must not be empty")

    if get_feature(db, feature_id) is None:
        raise FeatureNotFoundError

    if _find_vote(db, feature_id, voter_id) is not None:
        logger.info("Voter %s already voted for feature %s", voter_id, feature_id)
        return VoteOutcome.ALREADY_VOTED

    try:
        db.add(Vote(feature_id=feature_id, voter_id=voter_id, voted_at=utcnow()))
        db.commit()
    except IntegrityError:
        # Another request from the same voter won the insert
        db.rollback()
        logger.info("Concurrent duplicate vote by %s for feature %s", voter_id, feature_id)
        return VoteOutcome.ALREADY_VOTED

    logger.info("Vote recorded for feature %s", feature_id)
    return VoteOutcome.RECORDED


def count_votes(db: Session, feature_id: int) -> int:
    """Number of votes cast for a feature (0 for unknown features)."""
    return db.query(func.count(Vote.id)).filter(Vote.feature_id == feature_id).scalar() or 0


def count_votes_by_feature(
    db: Session, feature_ids: Iterable[int] | None = None
) -> dict[int, int]:
    """Vote counts keyed by feature id; requested features without votes map to 0."""
    query = db.query(Vote.feature_id, func.count(Vote.id)).group_by(Vote.feature_id)
    ids = None
    if feature_ids is not None:
        ids = list(feature_ids)
        if not ids:
            return {}
        query = query.filter(Vote.feature_id.in_(ids))

    counts = {feature_id: count for feature_id, count in query.all()}
    if ids is not None:
        for feature_id in ids:
            counts.setdefault(feature_id, 0)
    return counts


def has_voted(db: Session, feature_id: int, voter_id: str) -> bool:
    return _find_vote(db, feature_id, voter_id) is not None


def voted_feature_ids(db: Session, voter_id: str) -> set[int]:
    """Ids of all features this voter has voted for."""
    rows = db.query(Vote.feature_id).filter(Vote.voter_id == voter_id).all()
    return {feature_id for (feature_id,) in rows}
