from collections.abc import Generator

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from wishlist.db.session import SessionLocal
from wishlist.models.user import User
from wishlist.services.access import Principal
from wishlist.services.auth import decode_token, get_user_by_username
from wishlist.services.voter_identity import (
    RequestContext,
    VoterIdentity,
    resolve_voter_identity,
)

# auto_error=False so anonymous callers reach public routes
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _user_from_token(db: Session, token: str | None) -> User | None:
    if not token:
        return None
    token_data = decode_token(token)
    if token_data is None or token_data.username is None:
        return None
    user = get_user_by_username(db, token_data.username)
    if user is None or not user.is_active:
        return None
    return user


def get_current_user(
    db: Session = Depends(get_db), token: str | None = Depends(oauth2_scheme)
) -> User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if not token:
        raise credentials_exception
    token_data = decode_token(token)
    if token_data is None or token_data.username is None:
        raise credentials_exception
    user = get_user_by_username(db, token_data.username)
    if user is None:
        raise credentials_exception
    if not user.is_active:
        raise HTTPException(status_code=400, detail="Inactive user")
    return user


def get_principal(
    db: Session = Depends(get_db), token: str | None = Depends(oauth2_scheme)
) -> Principal:
    """Resolve the caller; missing or unusable tokens mean anonymous."""
    user = _user_from_token(db, token)
    if user is None:
        return Principal.anonymous()
    return Principal.for_user(user)


def _not_authenticated() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
        headers={"WWW-Authenticate": "Bearer"},
    )


def require_authenticated(principal: Principal = Depends(get_principal)) -> Principal:
    if not principal.is_authenticated():
        raise _not_authenticated()
    return principal


def require_voter(principal: Principal = Depends(get_principal)) -> Principal:
    """Voting needs a signed-in account; the ballot itself is keyed by the voter-id cookie."""
    if not principal.can_vote():
        raise _not_authenticated()
    return principal


def require_feature_author(principal: Principal = Depends(get_principal)) -> Principal:
    if not principal.can_create_feature():
        raise _not_authenticated()
    return principal


def require_admin(principal: Principal = Depends(require_authenticated)) -> Principal:
    """Only allow users who may edit feature metadata."""
    if not principal.can_edit_features():
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return principal


def get_request_context(request: Request) -> RequestContext:
    return RequestContext.from_request(request)


def get_voter_identity(context: RequestContext = Depends(get_request_context)) -> VoterIdentity:
    return resolve_voter_identity(context)
