"""
RCA Data Models

Defines data structures produced by fault-signature matching.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Any, TYPE_CHECKING

if TYPE_CHECKING:
    from netdiag.runbook.models import Pattern


@dataclass(frozen=True)
class MatchResult:
    """
    A single fault-signature hit.

    Attributes:
        pattern: The pattern that matched
        matched_text: First matched substring
        groups: Capture groups of that match ("" for groups that did not participate)
    """
    pattern: "Pattern"
    matched_text: str
    groups: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "pattern_id": self.pattern.id,
            "pattern_name": self.pattern.name,
            "severity": self.pattern.severity.value,
            "matched_text": self.matched_text,
            "groups": list(self.groups),
        }
