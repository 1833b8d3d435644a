"""Authorization rules for task mutation.

Each check returns an ``AuthorizationDecision`` instead of raising so callers
can branch on the outcome; ``TaskService`` turns a denial into ``AccessDenied``.

  * create   - any authenticated principal
  * reassign - the task's creator or its current assignee
  * delete   - the current assignee only
Anonymous principals are denied every mutation.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from ..db import models
from ..domain.enums import DenialReason
from ..security.principal import Principal


@dataclass(frozen=True)
class AuthorizationDecision:
    allowed: bool
    reason: Optional[DenialReason] = None

    @classmethod
    def allow(cls) -> "AuthorizationDecision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: DenialReason) -> "AuthorizationDecision":
        return cls(allowed=False, reason=reason)

    def __bool__(self) -> bool:
        return self.allowed


def can_create(principal: Principal) -> AuthorizationDecision:
    if principal.is_anonymous:
        return AuthorizationDecision.deny(DenialReason.ANONYMOUS)
    return AuthorizationDecision.allow()


def can_reassign(principal: Principal, task: models.Task) -> AuthorizationDecision:
    if principal.is_anonymous:
        return AuthorizationDecision.deny(DenialReason.ANONYMOUS)
    if principal.is_user(task.creator_id) or principal.is_user(task.assignee_id):
        return AuthorizationDecision.allow()
    return AuthorizationDecision.deny(DenialReason.NOT_CREATOR_OR_OWNER)


def can_delete(principal: Principal, task: models.Task) -> AuthorizationDecision:
    if principal.is_anonymous:
        return AuthorizationDecision.deny(DenialReason.ANONYMOUS)
    if principal.is_user(task.assignee_id):
        return AuthorizationDecision.allow()
    return AuthorizationDecision.deny(DenialReason.NOT_OWNER)
