from wishlist.models.base import Base
from wishlist.models.feature_request import FeatureRequest, FeatureStatus
from wishlist.models.user import User, UserRole
from wishlist.models.vote import Vote

__all__ = [
    "Base",
    "User",
    "UserRole",
    "FeatureRequest",
    "FeatureStatus",
    "Vote",
]
