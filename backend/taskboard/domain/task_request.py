"""Transient request payload for task create / update.

Built either directly or through the fluent builder::

    TaskRequest.builder().message("Sample").assignee_id(user.id).build()
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from ..errors import ValidationAppError


@dataclass(frozen=True)
class TaskRequest:
    message: str
    assignee_id: str

    def __post_init__(self):
        if not self.message or not self.message.strip():
            raise ValidationAppError("TASK_MESSAGE_REQUIRED", "message is required")
        if not self.assignee_id:
            raise ValidationAppError("TASK_ASSIGNEE_REQUIRED", "assigneeId is required")

    @classmethod
    def builder(cls) -> "TaskRequestBuilder":
        return TaskRequestBuilder()


class TaskRequestBuilder:
    def __init__(self):
        self._message: Optional[str] = None
        self._assignee_id: Optional[str] = None

    def message(self, message: str) -> "TaskRequestBuilder":
        self._message = message
        return self

    def assignee_id(self, assignee_id: str) -> "TaskRequestBuilder":
        self._assignee_id = assignee_id
        return self

    def build(self) -> TaskRequest:
        return TaskRequest(message=self._message or "", assignee_id=self._assignee_id or "")
