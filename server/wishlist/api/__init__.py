from fastapi import APIRouter

from wishlist.api import admin, auth, features, votes

api_router = APIRouter()


@api_router.get("/health", tags=["health"])
def api_health_check():
    """Health check endpoint for monitoring and load balancers."""
    return {"status": "ok", "service": "api"}


api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(features.router, prefix="/features", tags=["features"])
api_router.include_router(votes.router, prefix="/features", tags=["votes"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
