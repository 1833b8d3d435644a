from __future__ import annotations
from datetime import datetime, timezone
from typing import List, Optional
import logging
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from ..db import models
from ..domain.enums import DenialReason, TaskOperation
from ..domain.task_request import TaskRequest
from ..errors import AccessDenied, ValidationAppError
from ..metrics import ACCESS_DENIED_COUNT, TASK_MUTATION_COUNT
from ..security.principal import Principal
from . import task_policy
from .task_policy import AuthorizationDecision

logger = logging.getLogger(__name__)

class TaskNotFound(Exception):
    pass

class TaskService:
    """Task CRUD with the authorization policy applied to every mutation.

    All checks run before anything is written; a write that fails at the
    database rolls the session back, so a rejected operation never leaves a
    task partially modified.
    """

    def __init__(self, db: Session):
        self.db = db

    def create(self, principal: Principal, request: TaskRequest) -> models.Task:
        self._enforce(task_policy.can_create(principal), principal, TaskOperation.CREATE)
        assignee = self._require_assignee(request.assignee_id)
        task = models.Task(message=request.message, assignee=assignee, creator_id=principal.user_id)
        self.db.add(task)
        self._commit()
        self.db.refresh(task)
        TASK_MUTATION_COUNT.labels(operation=TaskOperation.CREATE.value).inc()
        logger.info("%s created task %s assigned to %s", principal.username, task.id, assignee.username)
        return task

    def update(self, principal: Principal, task_id: str, request: TaskRequest) -> models.Task:
        self._reject_anonymous(principal, TaskOperation.REASSIGN, task_id)
        task = self.get_task(task_id)
        self._enforce(task_policy.can_reassign(principal, task), principal, TaskOperation.REASSIGN, task_id)
        assignee = self._require_assignee(request.assignee_id)
        previous_assignee_id = task.assignee_id
        task.message = request.message
        task.assignee = assignee
        task.version = (task.version or 0) + 1
        task.updated_at = datetime.now(timezone.utc)
        self._commit()
        self.db.refresh(task)
        TASK_MUTATION_COUNT.labels(operation=TaskOperation.REASSIGN.value).inc()
        if previous_assignee_id != task.assignee_id:
            logger.info("%s reassigned task %s to %s", principal.username, task.id, assignee.username)
        else:
            logger.info("%s updated task %s", principal.username, task.id)
        return task

    def delete(self, principal: Principal, task_id: str) -> None:
        self._reject_anonymous(principal, TaskOperation.DELETE, task_id)
        task = self.get_task(task_id)
        self._enforce(task_policy.can_delete(principal, task), principal, TaskOperation.DELETE, task_id)
        self.db.delete(task)
        self._commit()
        TASK_MUTATION_COUNT.labels(operation=TaskOperation.DELETE.value).inc()
        logger.info("%s deleted task %s", principal.username, task_id)

    def get_task_by_id(self, task_id: str) -> Optional[models.Task]:
        return self.db.query(models.Task).filter(models.Task.id == task_id).first()

    def get_task(self, task_id: str) -> models.Task:
        task = self.get_task_by_id(task_id)
        if not task:
            raise TaskNotFound()
        return task

    def list_tasks(self, assignee_id: Optional[str] = None, creator_id: Optional[str] = None) -> List[models.Task]:
        q = self.db.query(models.Task)
        if assignee_id:
            q = q.filter(models.Task.assignee_id == assignee_id)
        if creator_id:
            q = q.filter(models.Task.creator_id == creator_id)
        return q.order_by(models.Task.created_at.desc()).all()

    def _require_assignee(self, assignee_id: str) -> models.User:
        assignee = self.db.query(models.User).filter(models.User.id == assignee_id).first()
        if not assignee:
            raise ValidationAppError("ASSIGNEE_NOT_FOUND", f"assignee {assignee_id} does not exist")
        return assignee

    def _reject_anonymous(self, principal: Principal, operation: TaskOperation, task_id: str) -> None:
        # runs before the task lookup
        if principal.is_anonymous:
            self._enforce(AuthorizationDecision.deny(DenialReason.ANONYMOUS), principal, operation, task_id)

    def _enforce(self, decision: AuthorizationDecision, principal: Principal,
                 operation: TaskOperation, task_id: Optional[str] = None) -> None:
        if decision.allowed:
            return
        ACCESS_DENIED_COUNT.labels(operation=operation.value, reason=decision.reason.value).inc()
        logger.warning("denied %s of task %s for %s: %s", operation.value, task_id or "-",
                       principal.username, decision.reason.value)
        raise AccessDenied(decision.reason)

    def _commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
