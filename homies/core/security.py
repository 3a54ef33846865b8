"""
Caller identity from bearer tokens.

Tokens are issued by the external identity provider; this service only
verifies them. The `sub` claim carries the user id, which handlers pass
explicitly into the service layer.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from homies.core.config import get_settings
from homies.core.logging import get_logger
from homies.db.session import get_db
from homies.models.user import User

logger = get_logger(__name__)
settings = get_settings()

bearer_scheme = HTTPBearer(auto_error=False)


def _credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Sign a token the same way the identity provider does."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    if credentials is None:
        raise _credentials_exception()

    try:
        payload = jwt.decode(
            credentials.credentials,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
        )
    except JWTError as e:
        logger.warning("token_rejected", error=str(e))
        raise _credentials_exception()

    user_id = payload.get("sub")
    if not user_id:
        raise _credentials_exception()
    return str(user_id)


async def get_current_user(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the token subject to a known user, 401 otherwise."""
    user = await db.get(User, user_id)
    if user is None:
        logger.warning("token_subject_unknown", user_id=user_id)
        raise _credentials_exception()
    return user
