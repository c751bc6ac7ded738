"""
Runbook Data Models

Defines data structures for runbooks, steps, and fault-signature patterns.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, Tuple, Union


class StepType(Enum):
    """Step dispatch type."""
    API = "api"
    REMOTE_EXEC = "remote_exec"


class Severity(Enum):
    """Fault-signature severity levels, ordered Info < Warning < Error < Critical."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    @property
    def fails_step(self) -> bool:
        """Whether a match at this severity fails its step."""
        return self in (Severity.ERROR, Severity.CRITICAL)

    def __lt__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank >= other.rank


_SEVERITY_RANK = {
    Severity.INFO: 0,
    Severity.WARNING: 1,
    Severity.ERROR: 2,
    Severity.CRITICAL: 3,
}


@dataclass(frozen=True)
class Pattern:
    """
    Regex-based fault signature.

    Attributes:
        id: Pattern identifier
        name: Human-readable name
        regex: Regex source; case sensitivity is set inline, e.g. "(?i)..."
        severity: Severity when matched
        message: Human message shown for the finding
        kb_articles: Knowledge-base references
        remediation: Remediation guidance
    """
    id: str
    name: str = ""
    regex: str = ""
    severity: Severity = Severity.INFO
    message: str = ""
    kb_articles: Tuple[str, ...] = field(default_factory=tuple)
    remediation: str = ""

    def __post_init__(self):
        object.__setattr__(self, "kb_articles", tuple(self.kb_articles))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "regex": self.regex,
            "severity": self.severity.value,
            "message": self.message,
            "kb_articles": list(self.kb_articles),
            "remediation": self.remediation,
        }


@dataclass(frozen=True)
class Step:
    """
    Individual diagnostic step definition.

    Attributes:
        id: Step identifier
        name: Human-readable name
        description: Detailed description
        type: Dispatch type (API or remote exec)
        command: Remote command, for remote exec steps
        api_call: Management-API operation name, for API steps
        patterns: Fault signatures evaluated against the step output
        required: Whether a Failed/Error outcome stops the run
    """
    id: str
    name: str = ""
    description: str = ""
    type: Union[StepType, str] = StepType.API
    command: str = ""
    api_call: str = ""
    patterns: Tuple[Pattern, ...] = field(default_factory=tuple)
    required: bool = False

    def __post_init__(self):
        object.__setattr__(self, "patterns", tuple(self.patterns))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "type": self.type.value if isinstance(self.type, StepType) else str(self.type),
            "command": self.command,
            "api_call": self.api_call,
            "patterns": [p.to_dict() for p in self.patterns],
            "required": self.required,
        }


@dataclass(frozen=True)
class Runbook:
    """
    Runbook definition.

    Attributes:
        id: Unique runbook identifier
        name: Human-readable name
        description: Detailed description
        category: Grouping category (e.g. "ha", "panorama")
        tags: Free-form tags
        steps: Ordered diagnostic steps
        requires_remote_exec: Whether the run needs a connected remote shell
    """
    id: str
    name: str = ""
    description: str = ""
    category: str = ""
    tags: Tuple[str, ...] = field(default_factory=tuple)
    steps: Tuple[Step, ...] = field(default_factory=tuple)
    requires_remote_exec: bool = False

    def __post_init__(self):
        # Held as tuples so a registered runbook cannot be changed in place
        object.__setattr__(self, "tags", tuple(self.tags))
        object.__setattr__(self, "steps", tuple(self.steps))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "tags": list(self.tags),
            "step_count": len(self.steps),
            "requires_remote_exec": self.requires_remote_exec,
        }
