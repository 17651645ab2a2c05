"""Resource synchronization core for the logistics admin console."""

from console_sync.context import SyncContext

__all__ = ["SyncContext"]

__version__ = "0.1.0"
