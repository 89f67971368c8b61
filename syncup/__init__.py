"""SyncUp: find the best time for a group to meet."""

__version__ = "1.0.0"
