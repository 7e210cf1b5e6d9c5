"""Password hashing, bearer tokens and account lookups."""

from datetime import UTC, datetime, timedelta

import bcrypt
import jwt
from sqlalchemy.orm import Session

from wishlist.core.config import get_settings
from wishlist.models.user import User, UserRole
from wishlist.schemas.auth import TokenData

settings = get_settings()


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))


def get_password_hash(password: str) -> str:
    # gensalt() picks a fresh salt and the default cost factor on every call
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """Sign a JWT carrying ``data`` (normally ``{"sub": username}``) plus an expiry."""
    to_encode = data.copy()
    expire = datetime.now(UTC) + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> TokenData | None:
    """Return the token's subject, or None for expired, forged or malformed tokens."""
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.PyJWTError:
        return None
    username: str | None = payload.get("sub")
    if username is None:
        return None
    return TokenData(username=username)


# Pre-computed hash checked when the username is unknown.
# Without it a missing user answers faster than a wrong password, leaking which names exist.
_DUMMY_HASH = get_password_hash("dummy-timing-equalization")


def authenticate_user(db: Session, username: str, password: str) -> User | None:
    user = get_user_by_username(db, username)
    if not user:
        # Spend the same bcrypt time as the found-user path
        verify_password(password, _DUMMY_HASH)
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def get_user_by_username(db: Session, username: str) -> User | None:
    return db.query(User).filter(User.username == username).first()


def create_user(
    db: Session, username: str, password: str, role: str = UserRole.USER.value
) -> User:
    """Create an account. Callers check for an existing username first."""
    user = User(username=username, password_hash=get_password_hash(password), role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user
