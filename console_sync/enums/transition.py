"""Status transitions that can be applied to entities."""

from enum import Enum


class Transition(str, Enum):
    """User-facing status change actions."""

    MARK_READ = "mark_read"
    PUBLISH = "publish"
    MOVE_TO_PENDING = "move_to_pending"
    DELETE = "delete"
