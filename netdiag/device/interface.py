"""
Device Collaborator Interfaces

Contracts for the transports the runbook engine drives. Implementations
(SSH sessions, XML API clients) live outside this package and own their
own connection lifecycle, authentication and timeouts.
"""

from abc import ABC, abstractmethod

from netdiag.runbook.cancellation import CancellationToken
from .models import CommandResult, SystemInfo, SystemResources, HAStatus, SessionInfo


class RemoteExecutor(ABC):
    """Remote-command capability (e.g. an SSH session to the device CLI)."""

    @abstractmethod
    def is_connected(self) -> bool:
        """Whether the session can currently run commands."""
        pass

    @abstractmethod
    def execute(self, token: CancellationToken, command: str) -> CommandResult:
        """
        Run a command on the device.

        Transport failures may be raised or reported on CommandResult.error.
        """
        pass


class ManagementAPI(ABC):
    """Management-API capability. Each method maps to one runbook api_call."""

    @abstractmethod
    def get_system_info(self, token: CancellationToken) -> SystemInfo:
        pass

    @abstractmethod
    def get_system_resources(self, token: CancellationToken) -> SystemResources:
        pass

    @abstractmethod
    def get_ha_status(self, token: CancellationToken) -> HAStatus:
        pass

    @abstractmethod
    def get_session_info(self, token: CancellationToken) -> SessionInfo:
        pass
