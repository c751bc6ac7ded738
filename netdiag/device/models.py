"""
Device Data Models

Records returned by the remote-command and management-API collaborators.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class CommandResult:
    """Remote command execution result"""
    command: str = ""
    stdout: str = ""
    stderr: str = ""
    exit_code: int = 0
    duration: float = 0.0
    error: Optional[Exception] = None

    @property
    def output(self) -> str:
        """Combined stdout and stderr, in that order."""
        return self.stdout + self.stderr

    def to_dict(self) -> Dict[str, Any]:
        return {
            "command": self.command,
            "stdout": self.stdout,
            "stderr": self.stderr,
            "exit_code": self.exit_code,
            "duration": self.duration,
            "error": str(self.error) if self.error else None,
        }


# ============ Management API Records ============

@dataclass
class SystemInfo:
    """Device identity and software version"""
    hostname: str = ""
    model: str = ""
    serial: str = ""
    version: str = ""
    uptime: str = ""


@dataclass
class SystemResources:
    """Management-plane resource utilisation"""
    cpu_percent: float = 0.0
    memory_percent: float = 0.0
    load_1: float = 0.0
    load_5: float = 0.0
    load_15: float = 0.0


@dataclass
class HAStatus:
    """High-availability pair state"""
    enabled: bool = False
    state: str = ""       # active, passive, suspended, initial
    peer_state: str = ""
    peer_ip: str = ""
    sync_state: str = ""
    mode: str = ""        # active-passive, active-active


@dataclass
class SessionInfo:
    """Session table counters"""
    active_count: int = 0
    max_count: int = 0
    cps: int = 0
    throughput_kbps: int = 0
