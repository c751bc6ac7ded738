"""
Fault-Signature Matching Module

Provides cached regex evaluation of runbook patterns against step output,
producing severity-tagged matches.
"""

from .models import MatchResult
from .pattern_matcher import PatternMatcher, PatternCompileError
from .signatures import SIGNATURES, KB_ARTICLES

__all__ = [
    "MatchResult",
    "PatternMatcher",
    "PatternCompileError",
    "SIGNATURES",
    "KB_ARTICLES",
]
