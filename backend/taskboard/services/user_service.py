from typing import Optional
import logging
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from ..db import models
from ..errors import ConflictError, ValidationAppError
from .auth_service import hash_password

logger = logging.getLogger(__name__)

class UserNotFound(Exception):
    pass

class UserService:
    def __init__(self, db: Session):
        self.db = db

    def create(self, username: str, password: str) -> models.User:
        if not username or not username.strip():
            raise ValidationAppError("USERNAME_REQUIRED", "username is required")
        if not password:
            raise ValidationAppError("PASSWORD_REQUIRED", "password is required")
        if self.get_by_username(username) is not None:
            raise ConflictError("USERNAME_TAKEN", f"username {username!r} is already taken")
        user = models.User(username=username, hashed_password=hash_password(password))
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # lost a race with a concurrent insert of the same username
            self.db.rollback()
            raise ConflictError("USERNAME_TAKEN", f"username {username!r} is already taken")
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.refresh(user)
        logger.info("created user %s (%s)", user.username, user.id)
        return user

    def get_user(self, user_id: str) -> models.User:
        user = self.db.query(models.User).filter(models.User.id == user_id).first()
        if not user:
            raise UserNotFound()
        return user

    def get_by_username(self, username: str) -> Optional[models.User]:
        return self.db.query(models.User).filter(models.User.username == username).first()
