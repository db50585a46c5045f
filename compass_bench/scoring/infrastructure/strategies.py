"""Built-in scoring strategies: exact, substring, regex and rubric."""

import re

from compass_bench.agent.domain.execution import RawExecution
from compass_bench.fixture.domain.criteria import (
    ExactMatchCriteria,
    RegexCriteria,
    RubricCriteria,
    RubricItem,
    SubstringCriteria,
)
from compass_bench.scoring.infrastructure.errors import ScoringError


def scoring_text(execution: RawExecution) -> str:
    """The text criteria are matched against: transcript, then the git diff."""
    if execution.git_diff:
        return f"{execution.transcript}\n{execution.git_diff}"
    return execution.transcript


def _normalize_whitespace(text: str) -> str:
    return " ".join(text.split())


def _fold(text: str, case_sensitive: bool) -> str:
    return text if case_sensitive else text.casefold()


class ExactMatchStrategy:
    kind = "exact"

    def points(self, criteria: ExactMatchCriteria, execution: RawExecution) -> float:
        actual = _fold(_normalize_whitespace(execution.transcript), criteria.case_sensitive)
        expected = _fold(_normalize_whitespace(criteria.expected), criteria.case_sensitive)
        return 1.0 if actual == expected else 0.0


class SubstringStrategy:
    kind = "substring"

    def points(self, criteria: SubstringCriteria, execution: RawExecution) -> float:
        haystack = _fold(scoring_text(execution), criteria.case_sensitive)
        found = sum(
            1
            for needle in criteria.expected
            if _fold(needle, criteria.case_sensitive) in haystack
        )
        if not criteria.require_all:
            return 1.0 if found else 0.0
        return found / len(criteria.expected)


class RegexStrategy:
    kind = "regex"

    def points(self, criteria: RegexCriteria, execution: RawExecution) -> float:
        flags = 0
        if criteria.ignore_case:
            flags |= re.IGNORECASE
        if criteria.multiline:
            flags |= re.MULTILINE
        try:
            matched = re.search(criteria.pattern, scoring_text(execution), flags)
        except re.error as exc:
            raise ScoringError(reason=f"invalid pattern {criteria.pattern!r}: {exc}") from exc
        return 1.0 if matched else 0.0


class RubricStrategy:
    """Weighted share of rubric items whose pattern occurs in the output."""

    kind = "rubric"

    def points(self, criteria: RubricCriteria, execution: RawExecution) -> float:
        text = scoring_text(execution)
        total = sum(item.weight for item in criteria.items)
        earned = sum(
            item.weight
            for item in criteria.items
            if self._satisfied(item=item, text=text, case_sensitive=criteria.case_sensitive)
        )
        return earned / total

    def _satisfied(self, item: RubricItem, text: str, case_sensitive: bool) -> bool:
        if not item.regex:
            return _fold(item.pattern, case_sensitive) in _fold(text, case_sensitive)
        flags = re.MULTILINE if case_sensitive else re.MULTILINE | re.IGNORECASE
        try:
            return re.search(item.pattern, text, flags) is not None
        except re.error as exc:
            raise ScoringError(reason=f"invalid pattern {item.pattern!r}: {exc}") from exc


BUILTIN_STRATEGIES = (
    ExactMatchStrategy(),
    SubstringStrategy(),
    RegexStrategy(),
    RubricStrategy(),
)
