from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from ..db import models

ANONYMOUS_USERNAME = "(anon)"


@dataclass(frozen=True)
class Principal:
    """Identity of the caller an operation is performed for."""
    user_id: Optional[str]
    username: str
    authenticated: bool = True

    @classmethod
    def anonymous(cls) -> "Principal":
        return cls(user_id=None, username=ANONYMOUS_USERNAME, authenticated=False)

    @classmethod
    def for_user(cls, user: models.User) -> "Principal":
        if user.id is None:
            raise ValueError("cannot build a principal for an unsaved user")
        return cls(user_id=user.id, username=user.username)

    @property
    def is_anonymous(self) -> bool:
        return not self.authenticated or self.user_id is None

    def is_user(self, user_id: Optional[str]) -> bool:
        return not self.is_anonymous and user_id is not None and self.user_id == user_id
