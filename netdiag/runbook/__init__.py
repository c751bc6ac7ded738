"""
Troubleshooting Runbook Module

Runs declared sequences of diagnostic steps against a managed device and
reports severity-ranked findings with remediation guidance.
"""

from .models import Runbook, Step, Pattern, StepType, Severity
from .registry import RunbookRegistry
from .results import RunbookResult, StepResult, StepStatus, Issue
from .cancellation import CancellationToken, RunCancelledError, DeadlineExceededError
from .executor import RunbookEngine, RunbookNotFoundError, PreconditionError
from .loader import RunbookLoader, RunbookLoadError

__all__ = [
    "Runbook",
    "Step",
    "Pattern",
    "StepType",
    "Severity",
    "RunbookRegistry",
    "RunbookResult",
    "StepResult",
    "StepStatus",
    "Issue",
    "CancellationToken",
    "RunCancelledError",
    "DeadlineExceededError",
    "RunbookEngine",
    "RunbookNotFoundError",
    "PreconditionError",
    "RunbookLoader",
    "RunbookLoadError",
]
