"""Exceptions raised client-side, before any request is issued."""


class InvalidTransitionError(Exception):
    """A status transition is not allowed from the entity's current state."""

    def __init__(
        self,
        message: str,
        transition: str | None = None,
        current_status: str | None = None,
        view: str | None = None,
    ):
        """Initialize invalid transition error.

        Args:
            message: Error message
            transition: Requested transition
            current_status: Last known status of the entity, if any
            view: Moderation tab the transition was requested from, if any
        """
        self.transition = transition
        self.current_status = current_status
        self.view = view
        super().__init__(message)


class InvalidQueryError(ValueError):
    """Page, page size or filter set cannot form a valid query."""
