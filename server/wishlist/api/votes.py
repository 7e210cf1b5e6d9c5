"""Vote endpoint. Voting needs a login; the ballot itself is keyed by the voter-id cookie."""

from fastapi import APIRouter, Depends, HTTPException, Path, Request, Response
from sqlalchemy.orm import Session

from wishlist.api.deps import get_db, get_voter_identity, require_voter
from wishlist.core.config import get_settings
from wishlist.core.rate_limit import limiter
from wishlist.schemas.vote import VoteResponse
from wishlist.services.access import Principal
from wishlist.services.catalog import FeatureNotFoundError
from wishlist.services.vote import VoteOutcome, cast_vote, count_votes
from wishlist.services.voter_identity import VoterIdentity, issue_voter_cookie

router = APIRouter()
settings = get_settings()

VOTE_MESSAGES = {
    VoteOutcome.RECORDED: "Thanks for your vote.",
    VoteOutcome.ALREADY_VOTED: "You have already voted for this feature.",
}


@router.post("/{feature_id}/vote", response_model=VoteResponse)
@limiter.limit(lambda: f"{settings.vote_rate_limit_per_minute}/minute")
def vote_for_feature(
    request: Request,
    response: Response,
    feature_id: int = Path(..., gt=0),
    db: Session = Depends(get_db),
    identity: VoterIdentity = Depends(get_voter_identity),
    _principal: Principal = Depends(require_voter),
) -> VoteResponse:
    """Upvote a feature. Idempotent: voting twice has no effect."""
    try:
        outcome = cast_vote(db, feature_id, identity.voter_id)
    except FeatureNotFoundError:
        raise HTTPException(status_code=404, detail="Feature not found")

    issue_voter_cookie(response, identity)
    return VoteResponse(
        status=outcome.value,
        message=VOTE_MESSAGES[outcome],
        vote_count=count_votes(db, feature_id),
        has_voted=True,
    )
