from wishlist.schemas.auth import Token, TokenData
from wishlist.schemas.feature import (
    FeatureCreate,
    FeatureOut,
    FeatureStatusUpdate,
    FeatureUpdate,
)
from wishlist.schemas.user import UserOut
from wishlist.schemas.vote import VoteResponse

__all__ = [
    "Token",
    "TokenData",
    "UserOut",
    "FeatureCreate",
    "FeatureUpdate",
    "FeatureStatusUpdate",
    "FeatureOut",
    "VoteResponse",
]
