from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from errors import Unauthenticated
from models import User

logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

# Bearer token scheme, missing headers are reported by require_identity
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Identity:
    user_id: str
    email: str


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    return pwd_context.verify(plain_password, password_hash)


def create_access_token(user_id: str, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed JWT whose subject is the user id."""
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(days=settings.JWT_EXPIRE_DAYS))
    claims = {"sub": user_id, "exp": expire}
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> str:
    """Return the user id carried by the token, or raise Unauthenticated."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        raise Unauthenticated("Not authorized, token failed")

    user_id = payload.get("sub")
    if not user_id:
        raise Unauthenticated("Not authorized, token failed")
    return user_id


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    user = db.query(User).filter(User.email == email).first()
    if user is None or not verify_password(password, user.password_hash):
        return None
    return user


def require_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Identity:
    if credentials is None:
        raise Unauthenticated("Not authorized, no token")

    user_id = decode_access_token(credentials.credentials)
    user = db.get(User, user_id)
    if user is None:
        logger.warning("Rejected token for unknown user %s", user_id)
        raise Unauthenticated("Not authorized, user not found")

    return Identity(user_id=user.id, email=user.email)
