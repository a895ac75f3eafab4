"""Services module for TaskFlow - state ownership, persistence and sync."""

from .config_service import ConfigService, get_config_service
from .kanban_store import KanbanStore
from .recommendation import RecommendationEngine, compute_recommendation, rank_tasks
from .remote_sync import RemoteEventMergeLayer
from .snapshot_service import SnapshotError, SnapshotService

__all__ = [
    "KanbanStore",
    "ConfigService",
    "get_config_service",
    "SnapshotService",
    "SnapshotError",
    "RecommendationEngine",
    "compute_recommendation",
    "rank_tasks",
    "RemoteEventMergeLayer",
]
