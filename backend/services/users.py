# backend/services/users.py
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from models.users import User
from services.errors import DuplicateEmailError, NotFoundError


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if not user:
        raise NotFoundError("User", user_id)
    return user


def create_user(db: Session, *, email: str, first_name: Optional[str] = None,
                last_name: Optional[str] = None, skin_type: Optional[str] = None) -> User:
    # Emails are stored normalized and compared case-insensitively
    normalized_email = email.strip().lower()
    if db.query(User).filter(func.lower(User.email) == normalized_email).first():
        raise DuplicateEmailError(normalized_email)

    user = User(email=normalized_email, first_name=first_name, last_name=last_name, skin_type=skin_type)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def update_user(db: Session, user_id: int, **changes) -> User:
    user = get_user(db, user_id)
    for field, value in changes.items():
        setattr(user, field, value)
    db.commit()
    db.refresh(user)
    return user


def ensure_actor(db: Session, user_id: Optional[int]) -> None:
    """Staff ids are optional on admin actions, but a given one must exist."""
    if user_id is not None:
        get_user(db, user_id)
