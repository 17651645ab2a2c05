"""Services of the synchronization core."""

from console_sync.services.aggregate_poller import AggregatePoller
from console_sync.services.batch_executor import MutationExecutor
from console_sync.services.fetch_composer import FetchComposer
from console_sync.services.selection_controller import SelectionController
from console_sync.services.transitions import (
    RemoteOperation,
    TransitionPlan,
    resolve_notification_transition,
    resolve_review_transition,
)

__all__ = [
    "AggregatePoller",
    "FetchComposer",
    "MutationExecutor",
    "RemoteOperation",
    "SelectionController",
    "TransitionPlan",
    "resolve_notification_transition",
    "resolve_review_transition",
]
