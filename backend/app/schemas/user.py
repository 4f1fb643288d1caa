from typing import Optional

from .common import CamelModel


class RegisterRequest(CamelModel):
    full_name: Optional[str] = None
    email: Optional[str] = None
    pseudo: Optional[str] = None
    password: Optional[str] = None
    confirm_password: Optional[str] = None


class LoginRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


class EditProfileRequest(CamelModel):
    pseudo: Optional[str] = None
    full_name: Optional[str] = None
    email: Optional[str] = None
    new_password: Optional[str] = None
    old_password: Optional[str] = None
    confirm_password: Optional[str] = None


class User(CamelModel):
    id: str
    full_name: str
    email: str
    pseudo: str


class LoginResponse(CamelModel):
    user: User
    token: str


class ProfileResponse(CamelModel):
    message: str
    user: User
