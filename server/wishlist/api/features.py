"""Feature request endpoints: ranked listing, creation and inline status edits."""

from fastapi import APIRouter, Depends, HTTPException, Path, Response
from sqlalchemy.orm import Session

from wishlist.api.deps import get_db, get_voter_identity, require_admin, require_feature_author
from wishlist.models.feature_request import FeatureRequest, FeatureStatus
from wishlist.schemas.feature import FeatureCreate, FeatureOut, FeatureStatusUpdate
from wishlist.services.access import Principal
from wishlist.services.catalog import (
    FeatureNotFoundError,
    FeatureValidationError,
    create_feature,
    get_feature,
    list_features,
    rank_by_votes_descending,
    update_status,
)
from wishlist.services.vote import (
    count_votes,
    count_votes_by_feature,
    has_voted,
    voted_feature_ids,
)
from wishlist.services.voter_identity import VoterIdentity, issue_voter_cookie

router = APIRouter()


def feature_out(feature: FeatureRequest, vote_count: int, has_voted: bool = False) -> FeatureOut:
    return FeatureOut(
        id=feature.id,
        title=feature.title,
        description=feature.description,
        category=feature.category,
        status=feature.status,
        created_at=feature.created_at,
        ticket_url=feature.ticket_url,
        vote_count=vote_count,
        has_voted=has_voted,
    )


def voted_by(db: Session, feature_id: int, identity: VoterIdentity) -> bool:
    # A freshly minted voter id cannot have a ballot yet
    if identity.is_new:
        return False
    return has_voted(db, feature_id, identity.voter_id)


def voted_ids_for(db: Session, identity: VoterIdentity) -> set[int]:
    if identity.is_new:
        return set()
    return voted_feature_ids(db, identity.voter_id)


@router.get("", response_model=list[FeatureOut])
def list_ranked_features(
    response: Response,
    status: FeatureStatus | None = None,
    db: Session = Depends(get_db),
    identity: VoterIdentity = Depends(get_voter_identity),
) -> list[FeatureOut]:
    """Features ranked by votes (most voted first), optionally filtered by status."""
    features = list_features(db, status)
    counts = count_votes_by_feature(db, [f.id for f in features])
    voted = voted_ids_for(db, identity)

    issue_voter_cookie(response, identity)
    return [
        feature_out(f, counts.get(f.id, 0), f.id in voted)
        for f in rank_by_votes_descending(features, counts)
    ]


@router.get("/{feature_id}", response_model=FeatureOut)
def get_single_feature(
    response: Response,
    feature_id: int = Path(..., gt=0),
    db: Session = Depends(get_db),
    identity: VoterIdentity = Depends(get_voter_identity),
) -> FeatureOut:
    feature = get_feature(db, feature_id)
    if not feature:
        raise HTTPException(status_code=404, detail="Feature not found")

    issue_voter_cookie(response, identity)
    return feature_out(feature, count_votes(db, feature.id), voted_by(db, feature.id, identity))


@router.post("", response_model=FeatureOut, status_code=201)
def submit_feature(
    data: FeatureCreate,
    db: Session = Depends(get_db),
    _principal: Principal = Depends(require_feature_author),
) -> FeatureOut:
    try:
        feature = create_feature(db, data.title, data.description, data.category)
    except FeatureValidationError as e:
        raise HTTPException(status_code=422, detail=e.message)
    return feature_out(feature, 0)


@router.patch("/{feature_id}/status", response_model=FeatureOut)
def change_feature_status(
    update_data: FeatureStatusUpdate,
    feature_id: int = Path(..., gt=0),
    db: Session = Depends(get_db),
    identity: VoterIdentity = Depends(get_voter_identity),
    _admin: Principal = Depends(require_admin),
) -> FeatureOut:
    try:
        feature = update_status(db, feature_id, update_data.status)
    except FeatureNotFoundError:
        raise HTTPException(status_code=404, detail="Feature not found")
    return feature_out(feature, count_votes(db, feature.id), voted_by(db, feature.id, identity))
