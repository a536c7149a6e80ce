"""Aggregation of findings from the report files of one build."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from dcgate.models import Finding, SeverityDistribution

logger = logging.getLogger(__name__)


class FindingsAggregator:
    """Merges findings into a deduplicated set and counts them by severity.

    Two findings are the same when their dependency key (file name, path and
    hashes) and vulnerability key are equal. Only the first occurrence is
    kept and counted in the distribution, so ``distribution.total`` always
    equals the number of aggregated findings. Not thread-safe.
    """

    def __init__(self, build_number: int = 0) -> None:
        self._distribution = SeverityDistribution(build_number=build_number)
        self._findings: dict[Finding, Finding] = {}
        self._occurrences: dict[Finding, int] = {}

    def add_findings(self, findings: Iterable[Finding]) -> None:
        added = 0
        for finding in findings:
            if finding in self._findings:
                self._occurrences[finding] += 1
                continue
            self._findings[finding] = finding
            self._occurrences[finding] = 1
            self._distribution.add(finding.normalized_severity)
            added += 1
        logger.debug("Aggregated %d new finding(s), %d in total", added, len(self._findings))

    @property
    def aggregated_findings(self) -> list[Finding]:
        return sorted(self._findings)

    @property
    def severity_distribution(self) -> SeverityDistribution:
        return self._distribution

    def get_aggregated_findings(self) -> list[Finding]:
        return self.aggregated_findings

    def get_severity_distribution(self) -> SeverityDistribution:
        return self._distribution

    def occurrences(self, finding: Finding) -> int:
        """How many times an equal finding was added, across all report files."""
        return self._occurrences.get(finding, 0)

    def __len__(self) -> int:
        return len(self._findings)
