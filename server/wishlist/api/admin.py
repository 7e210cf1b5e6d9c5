"""Admin feature management: full metadata edits including ticket links."""

from fastapi import APIRouter, Depends, HTTPException, Path
from sqlalchemy.orm import Session

from wishlist.api.deps import get_db, get_voter_identity, require_admin
from wishlist.api.features import feature_out, voted_by, voted_ids_for
from wishlist.core.config import get_settings
from wishlist.schemas.feature import FeatureOut, FeatureUpdate
from wishlist.services.access import Principal
from wishlist.services.catalog import (
    FeatureNotFoundError,
    FeatureValidationError,
    list_features,
    update_feature,
)
from wishlist.services.vote import count_votes, count_votes_by_feature
from wishlist.services.voter_identity import VoterIdentity

router = APIRouter()
settings = get_settings()


@router.get("/features", response_model=list[FeatureOut])
def admin_list_features(
    db: Session = Depends(get_db),
    identity: VoterIdentity = Depends(get_voter_identity),
    _admin: Principal = Depends(require_admin),
) -> list[FeatureOut]:
    features = list_features(db)
    counts = count_votes_by_feature(db, [f.id for f in features])
    voted = voted_ids_for(db, identity)
    return [feature_out(f, counts.get(f.id, 0), f.id in voted) for f in features]


@router.patch("/features/{feature_id}", response_model=FeatureOut)
def admin_update_feature(
    update_data: FeatureUpdate,
    feature_id: int = Path(..., gt=0),
    db: Session = Depends(get_db),
    identity: VoterIdentity = Depends(get_voter_identity),
    _admin: Principal = Depends(require_admin),
) -> FeatureOut:
    try:
        feature = update_feature(
            db,
            feature_id,
            update_data.model_dump(exclude_unset=True),
            ticket_base_url=settings.ticket_base_url,
        )
    except FeatureNotFoundError:
        raise HTTPException(status_code=404, detail="Feature not found")
    except FeatureValidationError as e:
        raise HTTPException(status_code=422, detail=e.message)
    return feature_out(feature, count_votes(db, feature.id), voted_by(db, feature.id, identity))
