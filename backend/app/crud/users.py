from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.db.models import User


def get_user(db: Session, user_id: str) -> Optional[User]:
    return db.get(User, user_id)


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.execute(select(User).where(User.email == email)).scalars().first()


def create_user(
    db: Session, full_name: str, email: str, pseudo: str, password_hash: str
) -> User:
    user = User(
        full_name=full_name, email=email, pseudo=pseudo, password_hash=password_hash
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user
