"""Domain enumerations for strong typing & validation."""
from enum import Enum

class DenialReason(str, Enum):
    ANONYMOUS = "ANONYMOUS"
    NOT_OWNER = "NOT_OWNER"
    NOT_CREATOR_OR_OWNER = "NOT_CREATOR_OR_OWNER"

    def describe(self) -> str:
        return _DENIAL_MESSAGES[self]

class TaskOperation(str, Enum):
    CREATE = "create"
    REASSIGN = "reassign"
    DELETE = "delete"


_DENIAL_MESSAGES = {
    DenialReason.ANONYMOUS: "anonymous callers may not modify tasks",
    DenialReason.NOT_OWNER: "only the task owner may delete a task",
    DenialReason.NOT_CREATOR_OR_OWNER: "only the task creator or owner may reassign a task",
}
