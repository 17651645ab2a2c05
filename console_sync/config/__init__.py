"""Configuration for the synchronization core."""

from console_sync.config.settings import SyncSettings

__all__ = ["SyncSettings"]
