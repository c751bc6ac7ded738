"""
Device collaborator contracts and records.
"""

from .interface import RemoteExecutor, ManagementAPI
from .models import (
    CommandResult,
    SystemInfo,
    SystemResources,
    HAStatus,
    SessionInfo,
)

__all__ = [
    "RemoteExecutor",
    "ManagementAPI",
    "CommandResult",
    "SystemInfo",
    "SystemResources",
    "HAStatus",
    "SessionInfo",
]
