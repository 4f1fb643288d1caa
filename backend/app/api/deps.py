import uuid
from dataclasses import dataclass

import jwt
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.config import Settings, get_settings
from app.core.logger import get_logger
from app.core.security import decode_access_token
from app.crud.users import get_user
from app.db.base import get_db
from app.db.models import User

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass
class AuthContext:
    user_id: str
    user: User


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> AuthContext:
    """Resolve the bearer token to an existing user or stop with 401."""
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=401, detail="Unauthorized")

    token = credentials.credentials
    try:
        user_id = decode_access_token(token, settings)
    except jwt.InvalidTokenError as e:
        logger.info(f"Rejected token: {e}")
        raise HTTPException(status_code=401, detail="Token is invalid or expired")

    user = get_user(db, user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="Unauthorized, User not found")

    return AuthContext(user_id=user.id, user=user)


def parse_recording_id(recording_id: str) -> str:
    """Accept a UUID in any canonical spelling and return its hex form."""
    try:
        return uuid.UUID(recording_id).hex
    except (ValueError, AttributeError, TypeError):
        raise HTTPException(
            status_code=400, detail="ID is required and must be a valid id"
        )
