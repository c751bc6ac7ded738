"""
Pattern Matcher - Regex Fault-Signature Evaluation

Compiles and caches fault-signature regexes and evaluates them against
the textual output of diagnostic steps.
"""

import logging
import re
import threading
from typing import List, Optional, Dict, TYPE_CHECKING

from .models import MatchResult

if TYPE_CHECKING:
    from netdiag.runbook.models import Pattern

logger = logging.getLogger(__name__)


class PatternCompileError(ValueError):
    """Raised when a fault-signature regex cannot be compiled."""

    def __init__(self, pattern: "Pattern", cause: re.error):
        self.pattern = pattern
        self.cause = cause
        super().__init__(
            f"Invalid regex for pattern {pattern.id or '<unnamed>'} "
            f"({pattern.regex!r}): {cause}"
        )


class PatternMatcher:
    """
    Regex pattern matcher with a shared compile cache.

    The cache is keyed by the exact regex source string, so two patterns
    with the same regex share one compiled object. Lookups take no lock;
    the lock is held only while inserting a newly compiled regex.
    Compile failures are never cached.

    Example:
        matcher = PatternMatcher()

        pattern = Pattern(id="p1", regex="(?i)commit.*fail", severity=Severity.ERROR)
        result = matcher.match(pattern, "Commit failed: validation error")

        if result:
            print(f"Matched: {result.matched_text}")
    """

    def __init__(self):
        self._compiled: Dict[str, re.Pattern] = {}
        self._lock = threading.Lock()

    def match(self, pattern: "Pattern", output: str) -> Optional[MatchResult]:
        """
        Match a single pattern against output.

        Args:
            pattern: Pattern to evaluate
            output: Text to search

        Returns:
            MatchResult for the first (leftmost) match, None if no match

        Raises:
            PatternCompileError: If the pattern regex is invalid
        """
        regex = self._get_or_compile(pattern)

        found = regex.search(output)
        if found is None or found.group(0) == "":
            return None

        return MatchResult(
            pattern=pattern,
            matched_text=found.group(0),
            groups=[g if g is not None else "" for g in found.groups()],
        )

    def match_all(self, patterns: List["Pattern"], output: str) -> List[MatchResult]:
        """
        Evaluate patterns in declared order and collect every match.

        Raises:
            PatternCompileError: On the first pattern that fails to compile
        """
        results = []

        for pattern in patterns:
            result = self.match(pattern, output)
            if result is not None:
                results.append(result)

        return results

    @property
    def cache_size(self) -> int:
        """Number of compiled regexes held in the cache."""
        return len(self._compiled)

    def clear_cache(self) -> None:
        with self._lock:
            self._compiled.clear()

    def _get_or_compile(self, pattern: "Pattern") -> re.Pattern:
        """Get a compiled regex from cache or compile and insert it."""
        source = pattern.regex

        compiled = self._compiled.get(source)
        if compiled is not None:
            return compiled

        try:
            compiled = re.compile(source)
        except re.error as e:
            logger.error(f"Failed to compile pattern {pattern.id}: {e}")
            raise PatternCompileError(pattern, e) from e

        with self._lock:
            # Another caller may have inserted it while we compiled
            return self._compiled.setdefault(source, compiled)
