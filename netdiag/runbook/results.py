"""
Runbook Results

Per-step outcomes, derived issues, and overall pass/fail computation.
"""

import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Dict, Optional, Any

from netdiag.rca.models import MatchResult
from netdiag.utils.time import utcnow
from .models import Runbook, Step, Severity


class StepStatus(Enum):
    """Individual step status."""
    PENDING = "pending"
    RUNNING = "running"
    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"
    ERROR = "error"

    @property
    def is_failure(self) -> bool:
        return self in (StepStatus.FAILED, StepStatus.ERROR)


@dataclass(frozen=True)
class StepResult:
    """
    Snapshot of one executed step.

    Attributes:
        step: Step definition that ran
        status: Terminal status
        output: Raw text the patterns were evaluated against
        error: Execution error, if any
        matches: Pattern matches on the output
        duration: Wall-clock duration in seconds
    """
    step: Step
    status: StepStatus
    output: str = ""
    error: Optional[Exception] = None
    matches: List[MatchResult] = field(default_factory=list)
    duration: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "step_id": self.step.id,
            "step_name": self.step.name,
            "status": self.status.value,
            "output": self.output,
            "error": str(self.error) if self.error else None,
            "matches": [m.to_dict() for m in self.matches],
            "duration_ms": round(self.duration * 1000, 3),
        }


@dataclass(frozen=True)
class Issue:
    """
    A detected problem with remediation guidance, derived from one match.
    """
    step_id: str
    step_name: str
    pattern_id: str
    pattern_name: str
    severity: Severity
    message: str
    matched_text: str
    kb_articles: List[str] = field(default_factory=list)
    remediation: str = ""

    @classmethod
    def from_match(cls, step: Step, match: MatchResult) -> "Issue":
        pattern = match.pattern
        return cls(
            step_id=step.id,
            step_name=step.name,
            pattern_id=pattern.id,
            pattern_name=pattern.name,
            severity=pattern.severity,
            message=pattern.message,
            matched_text=match.matched_text,
            kb_articles=list(pattern.kb_articles),
            remediation=pattern.remediation,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "step_id": self.step_id,
            "step_name": self.step_name,
            "pattern_id": self.pattern_id,
            "pattern_name": self.pattern_name,
            "severity": self.severity.value,
            "message": self.message,
            "matched_text": self.matched_text,
            "kb_articles": list(self.kb_articles),
            "remediation": self.remediation,
        }


class RunbookResult:
    """
    Accumulates the outcome of a single runbook run.

    Created at run start, appended to while steps execute, and sealed by
    finalize(), which computes `passed`. A run fails when any of these hold:
    a terminal error is set, no steps were recorded, any step ended Failed
    or Error, or any issue is Error or Critical severity.

    Example:
        result = RunbookResult(runbook)
        result.add_step_result(step_result)
        result.finalize()

        print(result.summary())
    """

    def __init__(self, runbook: Runbook):
        self.runbook = runbook
        self.steps: List[StepResult] = []
        self.issues: List[Issue] = []
        self.passed = False
        self.error: Optional[Exception] = None
        self.start_time: datetime = utcnow()
        self.end_time: Optional[datetime] = None
        self.duration: float = 0.0
        self._started = time.monotonic()

    def add_step_result(self, result: StepResult) -> None:
        """Append a step result and derive issues from its matches."""
        self.steps.append(result)

        for match in result.matches:
            self.issues.append(Issue.from_match(result.step, match))

    def finalize(self) -> None:
        """Record end time and compute overall pass/fail."""
        self.end_time = utcnow()
        self.duration = time.monotonic() - self._started
        self.passed = self._compute_passed()

    def _compute_passed(self) -> bool:
        # Fail if the run could not complete (e.g. remote exec unavailable)
        if self.error is not None:
            return False

        if not self.steps:
            return False

        if any(step.status.is_failure for step in self.steps):
            return False

        if any(issue.severity.fails_step for issue in self.issues):
            return False

        return True

    @property
    def is_finalized(self) -> bool:
        return self.end_time is not None

    @property
    def failed_steps(self) -> List[StepResult]:
        return [s for s in self.steps if s.status.is_failure]

    def has_issues(self) -> bool:
        return len(self.issues) > 0

    def issues_by_severity(self, severity: Severity) -> List[Issue]:
        return [i for i in self.issues if i.severity == severity]

    def critical_issues(self) -> List[Issue]:
        return self.issues_by_severity(Severity.CRITICAL)

    def error_issues(self) -> List[Issue]:
        return self.issues_by_severity(Severity.ERROR)

    def warning_issues(self) -> List[Issue]:
        return self.issues_by_severity(Severity.WARNING)

    def info_issues(self) -> List[Issue]:
        return self.issues_by_severity(Severity.INFO)

    def summary(self) -> str:
        """One-line summary, e.g. 'FAILED - 1 critical, 0 errors, 2 warnings (took 1.204s)'."""
        status = "PASSED" if self.passed else "FAILED"

        return (
            f"{status} - {len(self.critical_issues())} critical, "
            f"{len(self.error_issues())} errors, "
            f"{len(self.warning_issues())} warnings "
            f"(took {format_duration(self.duration)})"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "runbook_id": self.runbook.id,
            "runbook_name": self.runbook.name,
            "passed": self.passed,
            "summary": {
                "steps": len(self.steps),
                "critical": len(self.critical_issues()),
                "errors": len(self.error_issues()),
                "warnings": len(self.warning_issues()),
                "info": len(self.info_issues()),
            },
            "steps": [s.to_dict() for s in self.steps],
            "issues": [i.to_dict() for i in self.issues],
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat() if self.end_time else None,
            "duration_ms": round(self.duration * 1000, 3),
            "error": str(self.error) if self.error else None,
        }


def format_duration(seconds: float) -> str:
    """Render a duration rounded to milliseconds: '0s', '12ms', '1.204s', '2m3.5s'."""
    ms = int(round(seconds * 1000))
    if ms == 0:
        return "0s"
    if ms < 1000:
        return f"{ms}ms"
    if ms < 60_000:
        return f"{ms / 1000:g}s"
    minutes, rem = divmod(ms, 60_000)
    return f"{minutes}m{rem / 1000:g}s"


def status_icon(status: StepStatus) -> str:
    """Short text marker for a step status."""
    return {
        StepStatus.PASSED: "OK",
        StepStatus.FAILED: "FAIL",
        StepStatus.ERROR: "ERR",
        StepStatus.SKIPPED: "SKIP",
        StepStatus.RUNNING: "...",
    }.get(status, " ")


def severity_icon(severity: Severity) -> str:
    """Short text marker for a severity level."""
    return {
        Severity.CRITICAL: "[!!!]",
        Severity.ERROR: "[!!]",
        Severity.WARNING: "[!]",
        Severity.INFO: "[i]",
    }.get(severity, "[ ]")
