"""Run a unit of work as a given user.

The principal is handed to the callback explicitly; services take it as an
argument and never look it up on their own. For the duration of the call it
is also installed as the current principal (a ContextVar, so it is scoped to
the running thread / async task) and the previous value is restored on exit,
whether the callback returns or raises.

Usage:
    task = execute_in_user_context(alex, lambda p: service.create(p, request))

    with user_context(Principal.for_user(alex)) as p:
        service.delete(p, task.id)
"""
from __future__ import annotations
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Callable, Iterator, Optional, TypeVar
import logging

from ..db import models
from .principal import Principal

logger = logging.getLogger(__name__)

T = TypeVar("T")

_current_principal: ContextVar[Optional[Principal]] = ContextVar("current_principal", default=None)


def get_current_principal() -> Principal:
    """Return the installed principal, or the anonymous one when none is."""
    return _current_principal.get() or Principal.anonymous()


@contextmanager
def user_context(principal: Principal) -> Iterator[Principal]:
    token = _current_principal.set(principal)
    logger.debug("entering user context for %s", principal.username)
    try:
        yield principal
    finally:
        _current_principal.reset(token)
        logger.debug("left user context for %s", principal.username)


def execute_in_user_context(user: models.User, callback: Callable[[Principal], T]) -> T:
    """Invoke ``callback`` with ``user``'s principal installed and return its result.

    Impersonation is a trusted code path (tests, maintenance jobs): the user
    must already be persisted, no credentials are checked here. Errors from
    the callback propagate unchanged.
    """
    with user_context(Principal.for_user(user)) as principal:
        return callback(principal)
