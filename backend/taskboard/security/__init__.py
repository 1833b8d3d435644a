from .principal import Principal, ANONYMOUS_USERNAME
from .context import execute_in_user_context, user_context, get_current_principal

__all__ = [
    "Principal",
    "ANONYMOUS_USERNAME",
    "execute_in_user_context",
    "user_context",
    "get_current_principal",
]
