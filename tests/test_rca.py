"""
Tests for Fault-Signature Matching
"""

import re
import threading

import pytest

from netdiag.rca import (
    MatchResult, PatternMatcher, PatternCompileError, SIGNATURES, KB_ARTICLES
)
from netdiag.runbook import Pattern, Severity


class TestPatternMatcher:
    """Tests for PatternMatcher.match."""

    @pytest.fixture
    def matcher(self):
        return PatternMatcher()

    def test_simple_match(self, matcher):
        """Test a literal regex match."""
        pattern = Pattern(id="p1", regex="error", severity=Severity.ERROR)

        result = matcher.match(pattern, "found an error here")

        assert result is not None
        assert result.matched_text == "error"
        assert result.pattern == pattern
        assert result.groups == []

    def test_no_match(self, matcher):
        """Test no match returns None."""
        pattern = Pattern(id="p1", regex="critical", severity=Severity.CRITICAL)

        assert matcher.match(pattern, "everything is fine") is None

    def test_first_match_only(self, matcher):
        """Test leftmost match is returned, not all matches."""
        pattern = Pattern(id="p1", regex=r"eth\d+")

        result = matcher.match(pattern, "eth1 down, eth2 down")

        assert result.matched_text == "eth1"

    def test_capture_groups(self, matcher):
        """Test capture groups are returned without the full match."""
        pattern = Pattern(id="p1", regex=r"CPU: (\d+)\.(\d)%")

        result = matcher.match(pattern, "CPU: 95.5%\nMemory: 10.0%")

        assert result.matched_text == "CPU: 95.5%"
        assert result.groups == ["95", "5"]

    def test_non_participating_group_is_empty(self, matcher):
        """Test optional groups that did not match render as empty strings."""
        pattern = Pattern(id="p1", regex=r"state: (active)?(passive)?")

        result = matcher.match(pattern, "state: passive")

        assert result.groups == ["", "passive"]

    def test_case_sensitive_by_default(self, matcher):
        """Test matching is case sensitive without an inline flag."""
        pattern = Pattern(id="p1", regex="ERROR")

        assert matcher.match(pattern, "an error occurred") is None

    def test_inline_case_insensitive_flag(self, matcher):
        """Test (?i) makes a single pattern case insensitive."""
        pattern = Pattern(id="p1", regex="(?i)ERROR")

        result = matcher.match(pattern, "an error occurred")

        assert result.matched_text == "error"

    def test_empty_match_is_no_match(self, matcher):
        """Test a regex that only matches the empty string yields no result."""
        pattern = Pattern(id="p1", regex="x*")

        assert matcher.match(pattern, "abc") is None

    def test_empty_output(self, matcher):
        """Test matching against empty output."""
        pattern = Pattern(id="p1", regex="error")

        assert matcher.match(pattern, "") is None

    def test_multiline_output(self, matcher):
        """Test matching on a later line of multi-line output."""
        pattern = Pattern(id="p1", regex=r"(?m)^Sync: (\S+)$")
        output = "State: active\nPeer: passive\nSync: out-of-sync"

        result = matcher.match(pattern, output)

        assert result.groups == ["out-of-sync"]

    def test_invalid_regex_raises(self, matcher):
        """Test compile failure raises PatternCompileError."""
        pattern = Pattern(id="bad", regex="[invalid")

        with pytest.raises(PatternCompileError) as exc_info:
            matcher.match(pattern, "anything")

        assert "bad" in str(exc_info.value)
        assert isinstance(exc_info.value, ValueError)
        assert isinstance(exc_info.value.cause, re.error)

    def test_invalid_regex_not_cached(self, matcher):
        """Test compile failures are never cached."""
        pattern = Pattern(id="bad", regex="(unclosed")

        for _ in range(2):
            with pytest.raises(PatternCompileError):
                matcher.match(pattern, "text")

        assert matcher.cache_size == 0


class TestPatternMatcherCache:
    """Tests for the compiled-regex cache."""

    def test_same_regex_compiled_once(self):
        """Test identical regex sources share one cache entry."""
        matcher = PatternMatcher()
        pattern = Pattern(id="p1", regex="error")

        first = matcher.match(pattern, "an error")
        second = matcher.match(pattern, "an error")

        assert first == second
        assert matcher.cache_size == 1

    def test_different_patterns_same_regex_share_entry(self):
        """Test the cache is keyed by regex source, not pattern id."""
        matcher = PatternMatcher()

        matcher.match(Pattern(id="a", regex="fail"), "fail")
        matcher.match(Pattern(id="b", regex="fail", severity=Severity.ERROR), "fail")

        assert matcher.cache_size == 1

    def test_distinct_regexes_cached_separately(self):
        """Test one entry per distinct regex."""
        matcher = PatternMatcher()

        matcher.match(Pattern(id="a", regex="fail"), "")
        matcher.match(Pattern(id="b", regex="(?i)fail"), "")

        assert matcher.cache_size == 2

    def test_clear_cache(self):
        """Test clearing the cache."""
        matcher = PatternMatcher()
        matcher.match(Pattern(id="a", regex="fail"), "")

        matcher.clear_cache()

        assert matcher.cache_size == 0

    def test_concurrent_matching(self):
        """Test concurrent callers share the cache safely."""
        matcher = PatternMatcher()
        patterns = [Pattern(id=f"p{i}", regex=f"token{i % 5}") for i in range(20)]
        errors = []

        def worker():
            try:
                for _ in range(50):
                    results = matcher.match_all(patterns, "token0 token1 token2 token3 token4")
                    assert len(results) == 20
            except AssertionError as e:
                errors.append(e)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert matcher.cache_size == 5


class TestMatchAll:
    """Tests for PatternMatcher.match_all."""

    @pytest.fixture
    def matcher(self):
        return PatternMatcher()

    def test_collects_all_matches_in_order(self, matcher):
        """Test every matching pattern is returned in declared order."""
        patterns = [
            Pattern(id="p1", regex="error", severity=Severity.ERROR),
            Pattern(id="p2", regex="missing", severity=Severity.CRITICAL),
            Pattern(id="p3", regex="warning", severity=Severity.WARNING),
        ]

        results = matcher.match_all(patterns, "found an error and warning here")

        assert [r.pattern.id for r in results] == ["p1", "p3"]

    def test_empty_patterns(self, matcher):
        """Test no patterns yields no matches."""
        assert matcher.match_all([], "anything") == []

    def test_invalid_pattern_fails_whole_call(self, matcher):
        """Test a bad pattern is never skipped silently."""
        patterns = [
            Pattern(id="good", regex="error"),
            Pattern(id="bad", regex="[invalid"),
            Pattern(id="later", regex="here"),
        ]

        with pytest.raises(PatternCompileError):
            matcher.match_all(patterns, "error here")

    def test_match_carries_pattern_metadata(self, matcher):
        """Test the match keeps the full pattern for issue building."""
        pattern = Pattern(
            id="ha-sync",
            name="HA sync failed",
            regex="(?i)sync.*fail",
            severity=Severity.ERROR,
            message="Config not synchronised",
            kb_articles=["https://kb.example/ha-sync"],
            remediation="Run sync-to-remote",
        )

        results = matcher.match_all([pattern], "Sync: FAILED")

        assert len(results) == 1
        assert results[0].pattern.message == "Config not synchronised"
        assert results[0].pattern.kb_articles == ("https://kb.example/ha-sync",)

    def test_match_result_to_dict(self, matcher):
        """Test MatchResult serialization."""
        result = MatchResult(
            pattern=Pattern(id="p1", name="P1", severity=Severity.WARNING),
            matched_text="warn",
            groups=["x"],
        )

        data = result.to_dict()

        assert data["pattern_id"] == "p1"
        assert data["severity"] == "warning"
        assert data["groups"] == ["x"]


class TestSignatures:
    """Tests for the common signature tables."""

    def test_all_signatures_compile(self):
        """Test every bundled signature is a valid regex."""
        for name, source in SIGNATURES.items():
            assert re.compile(source) is not None, name

    @pytest.mark.parametrize("name,text", [
        ("ssl_handshake_failed", "SSL handshake failed with peer"),
        ("connection_refused", "Connection refused by 10.0.0.1"),
        ("ha_state_non_functional", "State: suspended"),
        ("commit_failed", "Result: FAIL"),
        ("high_cpu", "CPU utilization 95%"),
        ("oom_killer", "Out of memory: kill process"),
    ])
    def test_signature_matches_sample(self, name, text):
        """Test signatures match representative device output."""
        matcher = PatternMatcher()
        result = matcher.match(Pattern(id=name, regex=SIGNATURES[name]), text)

        assert result is not None

    def test_tables_are_read_only(self):
        """Test the tables cannot be mutated."""
        with pytest.raises(TypeError):
            SIGNATURES["new"] = "x"
        with pytest.raises(TypeError):
            KB_ARTICLES["new"] = "x"

    def test_kb_articles_are_urls(self):
        """Test KB entries are https links."""
        for url in KB_ARTICLES.values():
            assert url.startswith("https://")
