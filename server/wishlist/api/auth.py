import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from wishlist.api.deps import get_current_user, get_db
from wishlist.core.config import get_settings
from wishlist.core.rate_limit import limiter
from wishlist.models.user import User
from wishlist.schemas.auth import Token
from wishlist.schemas.user import UserOut
from wishlist.services.access import Principal
from wishlist.services.auth import authenticate_user, create_access_token

router = APIRouter()
settings = get_settings()
logger = logging.getLogger(__name__)


@router.post("/login", response_model=Token)
@limiter.limit(lambda: f"{settings.login_rate_limit_per_minute}/minute")
def login(
    request: Request,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
) -> Token:
    user = authenticate_user(db, form_data.username, form_data.password)
    if not user or not user.is_active:
        logger.info("Failed login for %r", form_data.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return Token(access_token=create_access_token(data={"sub": user.username}))


@router.get("/me", response_model=UserOut)
def get_me(current_user: User = Depends(get_current_user)) -> UserOut:
    return UserOut(
        id=current_user.id,
        username=current_user.username,
        is_active=current_user.is_active,
        role=current_user.role,
        is_admin=Principal.for_user(current_user).is_admin(),
        created_at=current_user.created_at,
    )
