"""
Runbook Engine

Executes diagnostic runbooks step by step against a managed device and
aggregates fault-signature matches into a pass/fail result.
"""

import logging
import time
from typing import Callable, Dict, Optional, Tuple, Union, TYPE_CHECKING

from netdiag.rca.pattern_matcher import PatternMatcher, PatternCompileError
from .cancellation import CancellationToken
from .models import Runbook, Step, StepType
from .registry import RunbookRegistry
from .results import RunbookResult, StepResult, StepStatus, status_icon

if TYPE_CHECKING:
    from netdiag.device.interface import RemoteExecutor, ManagementAPI

logger = logging.getLogger(__name__)


# (step_index, step, status, output)
StepCallback = Callable[[int, Step, StepStatus, str], None]


class RunbookNotFoundError(LookupError):
    """Runbook ID is not in the registry."""

    def __init__(self, runbook_id: str):
        self.runbook_id = runbook_id
        super().__init__(f"Runbook not found: {runbook_id}")


class PreconditionError(Exception):
    """Runbook cannot start with the current collaborators."""


class StepExecutionError(Exception):
    """A step could not be dispatched or its collaborator failed."""


# ============ Management API Rendering ============
#
# Each operation maps to one ManagementAPI method and a fixed text rendering.
# Runbook patterns are written against these field labels.

def _render_system_info(info) -> str:
    return (
        f"Hostname: {info.hostname}\n"
        f"Model: {info.model}\n"
        f"Version: {info.version}\n"
        f"Uptime: {info.uptime}"
    )


def _render_system_resources(res) -> str:
    return (
        f"CPU: {res.cpu_percent:.1f}%\n"
        f"Memory: {res.memory_percent:.1f}%\n"
        f"Load: {res.load_1:.2f}/{res.load_5:.2f}/{res.load_15:.2f}"
    )


def _render_ha_status(status) -> str:
    if not status.enabled:
        return "HA not enabled"
    return (
        f"State: {status.state}\n"
        f"Peer: {status.peer_state}\n"
        f"Sync: {status.sync_state}"
    )


def _render_session_info(info) -> str:
    return (
        f"Active: {info.active_count}\n"
        f"Max: {info.max_count}\n"
        f"CPS: {info.cps}"
    )


API_OPERATIONS: Dict[str, Tuple[str, Callable]] = {
    "system_info": ("get_system_info", _render_system_info),
    "system_resources": ("get_system_resources", _render_system_resources),
    "ha_status": ("get_ha_status", _render_ha_status),
    "session_info": ("get_session_info", _render_session_info),
}


def resolve_api_call(name: str) -> Optional[Tuple[str, Callable]]:
    """Look up an API operation; accepts 'system_info' or 'system-info'."""
    return API_OPERATIONS.get(name.strip().lower().replace("-", "_"))


class RunbookEngine:
    """
    Runs troubleshooting runbooks.

    Steps run strictly in declaration order on the calling thread. A
    required step that ends Failed or Error stops the run; the steps after
    it are not attempted and do not appear in the result. Cancellation is
    checked before each step.

    Only an unknown runbook ID raises. Everything that happens once a run
    has started (missing collaborators, transport errors, bad regexes,
    cancellation) is recorded on the returned RunbookResult.

    Example:
        engine = RunbookEngine(api_client=api, remote_client=ssh, registry=registry)
        engine.set_step_callback(lambda i, step, status, out: print(i, status.value))

        result = engine.run("panorama-connectivity")
        print(result.summary())
    """

    def __init__(
        self,
        api_client: Optional["ManagementAPI"] = None,
        remote_client: Optional["RemoteExecutor"] = None,
        registry: Optional[RunbookRegistry] = None,
    ):
        """
        Initialize the engine.

        Args:
            api_client: Management-API collaborator (optional)
            remote_client: Remote-command collaborator (optional)
            registry: Runbook catalog (empty registry if None)
        """
        self.api_client = api_client
        self.remote_client = remote_client
        self._registry = registry if registry is not None else RunbookRegistry()
        self.pattern_matcher = PatternMatcher()
        self.step_callback: Optional[StepCallback] = None

    @property
    def registry(self) -> RunbookRegistry:
        return self._registry

    def set_step_callback(self, callback: Optional[StepCallback]) -> None:
        """Set the callback fired on step start and completion."""
        self.step_callback = callback

    def has_remote_exec(self) -> bool:
        """True if a remote-command collaborator is present and connected."""
        return self.remote_client is not None and self.remote_client.is_connected()

    def run(
        self,
        runbook_id: str,
        token: Optional[CancellationToken] = None,
        callback: Optional[StepCallback] = None,
    ) -> RunbookResult:
        """
        Execute a registered runbook by ID.

        Raises:
            RunbookNotFoundError: If the ID is not registered
        """
        runbook, found = self._registry.get(runbook_id)
        if not found:
            raise RunbookNotFoundError(runbook_id)

        return self.run_runbook(runbook, token=token, callback=callback)

    def run_runbook(
        self,
        runbook: Runbook,
        token: Optional[CancellationToken] = None,
        callback: Optional[StepCallback] = None,
    ) -> RunbookResult:
        """
        Execute a runbook instance.

        Args:
            runbook: Runbook to execute
            token: Cancellation token, checked before each step
            callback: Overrides the engine's step callback for this run

        Returns:
            Finalized RunbookResult
        """
        token = token or CancellationToken()
        callback = callback or self.step_callback
        result = RunbookResult(runbook)

        logger.info(f"Starting runbook: {runbook.id} ({len(runbook.steps)} steps)")

        if runbook.requires_remote_exec and not self.has_remote_exec():
            result.error = PreconditionError(
                "runbook requires remote exec but remote executor is not connected"
            )
            logger.warning(f"Runbook {runbook.id} not run: {result.error}")
            result.finalize()
            return result

        for index, step in enumerate(runbook.steps):
            cause = token.cause
            if cause is not None:
                logger.warning(f"Runbook {runbook.id} cancelled before step {step.id}: {cause}")
                result.error = cause
                break

            step_result = self._execute_step(token, index, step, callback)
            result.add_step_result(step_result)

            if step.required and step_result.status.is_failure:
                logger.error(
                    f"Required step {step.id} ended {step_result.status.value}; "
                    f"stopping runbook {runbook.id}"
                )
                break

        result.finalize()
        logger.info(f"Runbook {runbook.id} finished: {result.summary()}")
        return result

    def can_run(self, runbook: Runbook) -> Tuple[bool, str]:
        """Check whether the runbook can run with the current collaborators."""
        if self.api_client is None:
            return False, "API client not available"

        if runbook.requires_remote_exec:
            if self.remote_client is None:
                return False, "SSH not configured"
            if not self.remote_client.is_connected():
                return False, "SSH not connected"

        return True, ""

    def _execute_step(
        self,
        token: CancellationToken,
        index: int,
        step: Step,
        callback: Optional[StepCallback],
    ) -> StepResult:
        """Run a single step: dispatch, match patterns, classify."""
        if callback:
            callback(index, step, StepStatus.RUNNING, "")

        start_time = time.monotonic()
        output = ""
        error: Optional[Exception] = None
        matches = []

        logger.debug(f"Executing step {index}: {step.id} ({_type_name(step.type)})")

        try:
            step_type = _coerce_step_type(step.type)
            if step_type is StepType.REMOTE_EXEC:
                output = self._execute_remote_step(token, step)
            elif step_type is StepType.API:
                output = self._execute_api_step(token, step)
            else:
                raise StepExecutionError(f"unknown step type: {_type_name(step.type)}")

            matches = self.pattern_matcher.match_all(step.patterns, output)

        except _RemoteCommandError as e:
            output = e.output
            error = e.cause
        except (StepExecutionError, PatternCompileError) as e:
            error = e
        except Exception as e:
            logger.error(f"Step {step.id} error: {e}")
            error = e

        duration = time.monotonic() - start_time

        if error is not None:
            status = StepStatus.ERROR
            matches = []
            logger.warning(f"Step {step.id} error: {error}")
        elif any(m.pattern.severity.fails_step for m in matches):
            status = StepStatus.FAILED
        else:
            status = StepStatus.PASSED

        logger.info(f"[{status_icon(status)}] Step {step.id} ({duration * 1000:.0f}ms)")

        if callback:
            callback(index, step, status, output)

        return StepResult(
            step=step,
            status=status,
            output=output,
            error=error,
            matches=matches,
            duration=duration,
        )

    def _execute_remote_step(self, token: CancellationToken, step: Step) -> str:
        """Run a remote command; output is stdout followed by stderr."""
        if self.remote_client is None:
            raise StepExecutionError("remote executor not available")

        if not self.remote_client.is_connected():
            raise StepExecutionError("remote executor not connected")

        cmd_result = self.remote_client.execute(token, step.command)

        if cmd_result.error is not None:
            raise _RemoteCommandError(cmd_result.output, cmd_result.error)

        return cmd_result.output

    def _execute_api_step(self, token: CancellationToken, step: Step) -> str:
        """Call the mapped management-API operation and render its record."""
        if self.api_client is None:
            raise StepExecutionError("API client not available")

        operation = resolve_api_call(step.api_call)
        if operation is None:
            raise StepExecutionError(f"unknown API call: {step.api_call}")

        method_name, render = operation
        record = getattr(self.api_client, method_name)(token)
        return render(record)


class _RemoteCommandError(Exception):
    """Carries the partial output of a command that reported a transport error."""

    def __init__(self, output: str, cause: Exception):
        self.output = output
        self.cause = cause
        super().__init__(str(cause))


def _coerce_step_type(value: Union[StepType, str]) -> Optional[StepType]:
    if isinstance(value, StepType):
        return value
    try:
        return StepType(value)
    except ValueError:
        return None


def _type_name(value: Union[StepType, str]) -> str:
    return value.value if isinstance(value, StepType) else str(value)
