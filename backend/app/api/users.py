import re

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api.deps import AuthContext, get_current_user
from app.constants import EMAIL_PATTERN, MIN_PASSWORD_LENGTH
from app.core.config import Settings, get_settings
from app.core.logger import get_logger
from app.core.security import create_access_token, hash_password, verify_password
from app.crud.users import create_user, get_user_by_email
from app.db.base import get_db
from app.schemas.common import Message
from app.schemas.user import (
    EditProfileRequest,
    LoginRequest,
    LoginResponse,
    ProfileResponse,
    RegisterRequest,
    User,
)

router = APIRouter(prefix="/api/user", tags=["user"])
logger = get_logger(__name__)

_email_re = re.compile(EMAIL_PATTERN)


def is_valid_email(email: str) -> bool:
    return bool(_email_re.match(email))


@router.post("/register", response_model=Message, status_code=201)
def register(
    payload: RegisterRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> Message:
    """Create an account. The password is stored only as a bcrypt hash."""
    fields = [
        payload.full_name,
        payload.email,
        payload.pseudo,
        payload.password,
        payload.confirm_password,
    ]
    if not all(fields):
        raise HTTPException(status_code=400, detail="Please fill in all the fields.")

    if not is_valid_email(payload.email):
        raise HTTPException(status_code=400, detail="Invalid email format.")

    if len(payload.password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(
            status_code=400,
            detail=f"Password must be at least {MIN_PASSWORD_LENGTH} characters long.",
        )

    if payload.password != payload.confirm_password:
        raise HTTPException(status_code=400, detail="Passwords do not match.")

    if get_user_by_email(db, payload.email):
        raise HTTPException(status_code=400, detail="This email is already in use.")

    try:
        user = create_user(
            db,
            full_name=payload.full_name,
            email=payload.email,
            pseudo=payload.pseudo,
            password_hash=hash_password(payload.password, rounds=settings.BCRYPT_ROUNDS),
        )
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="This email is already in use.")

    logger.info(f"Registered user {user.id}")
    return Message(message="User registered successfully.")


@router.post("/login", response_model=LoginResponse, status_code=201)
def login(
    payload: LoginRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> LoginResponse:
    if not payload.email or not payload.password:
        raise HTTPException(status_code=400, detail="Email and password are required.")

    user = get_user_by_email(db, payload.email)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found.")

    if not verify_password(payload.password, user.password_hash):
        logger.info(f"Failed login for user {user.id}")
        raise HTTPException(status_code=400, detail="Incorrect password.")

    token = create_access_token(user.id, settings)
    return LoginResponse(user=User.model_validate(user), token=token)


@router.put("/editProfile", response_model=ProfileResponse, status_code=201)
def edit_profile(
    payload: EditProfileRequest,
    auth: AuthContext = Depends(get_current_user),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> ProfileResponse:
    """Update handle, name, email and/or password of the caller.

    Every check runs before anything is changed, so a rejected request
    leaves the account untouched.
    """
    user = auth.user

    change_email = bool(payload.email) and payload.email != user.email
    if change_email:
        if not is_valid_email(payload.email):
            raise HTTPException(status_code=400, detail="Invalid email address")
        if get_user_by_email(db, payload.email):
            raise HTTPException(status_code=400, detail="Email already in use")

    new_hash = None
    if payload.new_password:
        if not payload.old_password or not payload.confirm_password:
            raise HTTPException(
                status_code=400, detail="Old and confirm password are required"
            )
        if not verify_password(payload.old_password, user.password_hash):
            raise HTTPException(status_code=400, detail="Old password is incorrect")
        if payload.new_password != payload.confirm_password:
            raise HTTPException(
                status_code=400,
                detail="New password and confirm password do not match",
            )
        if len(payload.new_password) < MIN_PASSWORD_LENGTH:
            raise HTTPException(
                status_code=400,
                detail=f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
            )
        new_hash = hash_password(payload.new_password, rounds=settings.BCRYPT_ROUNDS)

    if payload.pseudo:
        user.pseudo = payload.pseudo
    if payload.full_name:
        user.full_name = payload.full_name
    if change_email:
        user.email = payload.email
    if new_hash:
        user.password_hash = new_hash

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="Email already in use")
    db.refresh(user)

    return ProfileResponse(
        message="Profile updated successfully", user=User.model_validate(user)
    )
