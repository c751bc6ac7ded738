"""
Runbook Loader

Loads and parses runbook definitions from YAML files and hands them to a
RunbookRegistry. The engine never reads files itself.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .models import Runbook, Step, Pattern, StepType, Severity
from .registry import RunbookRegistry

logger = logging.getLogger(__name__)

# Bundled runbook catalog, shipped as package data
EMBEDDED_RUNBOOK_DIR = Path(__file__).parent / "runbooks"

# Older catalogs used "ssh" for remote exec steps
_STEP_TYPE_ALIASES = {"ssh": StepType.REMOTE_EXEC.value}


class RunbookLoadError(Exception):
    """A runbook file could not be read or parsed."""


class RunbookLoader:
    """
    Loads runbooks from YAML configuration files.

    Example:
        registry = RunbookRegistry()
        loader = RunbookLoader(registry)

        # Bundled catalog plus site-specific runbooks
        loader.load_embedded()
        loader.load_directory("/etc/netdiag/runbooks")

        print(f"{registry.count()} runbooks available")
    """

    def __init__(
        self,
        registry: Optional[RunbookRegistry] = None,
        runbook_dir: Optional[Union[str, Path]] = None,
    ):
        """
        Initialize the loader.

        Args:
            registry: Registry to populate (a new one if None)
            runbook_dir: Extra directory searched by load_all()
        """
        self.registry = registry if registry is not None else RunbookRegistry()
        self.runbook_dir = Path(runbook_dir) if runbook_dir else None

    def load_all(self) -> List[Runbook]:
        """Load the bundled catalog, then the configured directory (if any)."""
        runbooks = self.load_embedded()
        if self.runbook_dir is not None:
            runbooks.extend(self.load_directory(self.runbook_dir))
        return runbooks

    def load_embedded(self) -> List[Runbook]:
        """Load the runbooks bundled with the package."""
        return self.load_directory(EMBEDDED_RUNBOOK_DIR)

    def load_directory(self, directory: Union[str, Path]) -> List[Runbook]:
        """
        Load every *.yaml / *.yml file in a directory.

        Files that fail to parse are logged and skipped.

        Returns:
            List of loaded runbooks
        """
        directory = Path(directory)
        if not directory.is_dir():
            logger.warning(f"Runbook directory not found: {directory}")
            return []

        runbooks = []
        files = sorted(list(directory.glob("*.yaml")) + list(directory.glob("*.yml")))

        for yaml_file in files:
            try:
                runbook = self.load_file(yaml_file)
            except RunbookLoadError as e:
                logger.error(f"Failed to load runbook {yaml_file}: {e}")
                continue

            if runbook:
                runbooks.append(runbook)

        logger.info(f"Loaded {len(runbooks)} runbooks from {directory}")
        return runbooks

    def load_file(self, file_path: Union[str, Path]) -> Optional[Runbook]:
        """
        Load a single runbook file and register it.

        Returns:
            The runbook, or None if the file has no runbook id

        Raises:
            RunbookLoadError: If the file cannot be read or parsed
        """
        file_path = Path(file_path)
        try:
            with open(file_path, "r") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise RunbookLoadError(str(e)) from e

        if not isinstance(data, dict) or not data.get("id"):
            logger.warning(f"Skipping {file_path.name}: no runbook id")
            return None

        runbook = self.parse(data)
        self.registry.register(runbook)
        logger.info(f"Loaded runbook: {runbook.id} from {file_path.name}")
        return runbook

    def parse(self, data: Dict[str, Any]) -> Runbook:
        """
        Build a Runbook from a definition record. Unknown keys are ignored.

        Raises:
            RunbookLoadError: On a malformed record, step type or severity
        """
        try:
            steps = [self._parse_step(s) for s in _as_list(data, "steps")]
            tags = [str(t) for t in _as_list(data, "tags")]
            requires_remote_exec = data.get(
                "requires_remote_exec", data.get("requires_ssh", False)
            )

            return Runbook(
                id=str(data["id"]),
                name=data.get("name", data["id"]),
                description=data.get("description", ""),
                category=data.get("category", ""),
                tags=tags,
                steps=steps,
                requires_remote_exec=bool(requires_remote_exec),
            )
        except (ValueError, TypeError, AttributeError, KeyError) as e:
            raise RunbookLoadError(f"runbook {data.get('id')}: {e}") from e

    def _parse_step(self, data: Any) -> Step:
        if not isinstance(data, dict):
            raise ValueError(f"step must be a mapping, got {type(data).__name__}")

        type_value = str(data.get("type", StepType.API.value)).lower()
        type_value = _STEP_TYPE_ALIASES.get(type_value, type_value)

        return Step(
            id=data.get("id", ""),
            name=data.get("name", ""),
            description=data.get("description", ""),
            type=StepType(type_value),
            command=data.get("command", ""),
            api_call=data.get("api_call", ""),
            patterns=[self._parse_pattern(p) for p in _as_list(data, "patterns")],
            required=bool(data.get("required", False)),
        )

    def _parse_pattern(self, data: Any) -> Pattern:
        if not isinstance(data, dict):
            raise ValueError(f"pattern must be a mapping, got {type(data).__name__}")

        return Pattern(
            id=data.get("id", ""),
            name=data.get("name", ""),
            regex=data.get("regex", ""),
            severity=Severity(str(data.get("severity", Severity.INFO.value)).lower()),
            message=data.get("message", ""),
            kb_articles=[str(a) for a in _as_list(data, "kb_articles")],
            remediation=data.get("remediation", ""),
        )


def _as_list(data: Dict[str, Any], key: str) -> List[Any]:
    """Return data[key] as a list; a missing or null key is empty."""
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"'{key}' must be a list, got {type(value).__name__}")
    return value
