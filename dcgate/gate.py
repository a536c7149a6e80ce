"""Risk gate: compare severity distributions against build thresholds.

Usage::

    from dcgate.gate import Outcome, RiskGate, ThresholdGroup, Thresholds

    gate = RiskGate(Thresholds(total_findings=ThresholdGroup(failed_critical=1)))
    outcome = gate.evaluate(previous_distribution, current_distribution)
    if outcome is Outcome.FAILURE:
        ...
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from dcgate.models import Severity, SeverityDistribution

logger = logging.getLogger(__name__)

GATED_SEVERITIES = (Severity.CRITICAL, Severity.HIGH, Severity.MEDIUM, Severity.LOW)


class Outcome(Enum):
    SUCCESS = "SUCCESS"
    UNSTABLE = "UNSTABLE"
    FAILURE = "FAILURE"

    @property
    def rank(self) -> int:
        return {
            Outcome.SUCCESS: 0,
            Outcome.UNSTABLE: 1,
            Outcome.FAILURE: 2,
        }[self]

    def is_worse_than(self, other: Outcome) -> bool:
        return self.rank > other.rank


@dataclass(frozen=True)
class ThresholdGroup:
    """Per-severity ceilings. ``None`` means no limit for that severity/state."""

    unstable_critical: int | None = None
    unstable_high: int | None = None
    unstable_medium: int | None = None
    unstable_low: int | None = None
    failed_critical: int | None = None
    failed_high: int | None = None
    failed_medium: int | None = None
    failed_low: int | None = None
    limit_to_analysis_exploitable: bool = False

    def unstable(self, severity: Severity) -> int | None:
        return getattr(self, f"unstable_{severity.value.lower()}")

    def failed(self, severity: Severity) -> int | None:
        return getattr(self, f"failed_{severity.value.lower()}")


@dataclass(frozen=True)
class Thresholds:
    total_findings: ThresholdGroup = field(default_factory=ThresholdGroup)
    new_findings: ThresholdGroup = field(default_factory=ThresholdGroup)


class RiskGate:
    """Evaluates a build's findings against total and new-findings thresholds.

    Total thresholds apply to the absolute counts of the current build. New
    thresholds apply to the growth against the previous build and are only
    checked when a previous distribution is given. A failure returns
    immediately; instability is remembered and returned if nothing fails.
    Only critical, high, medium and low counts are compared.
    """

    def __init__(self, thresholds: Thresholds):
        self.thresholds = thresholds

    def evaluate(
        self,
        previous: SeverityDistribution | None,
        current: SeverityDistribution,
    ) -> Outcome:
        result = Outcome.SUCCESS
        total = self.thresholds.total_findings
        new = self.thresholds.new_findings

        if self._exceeds(current, None, total.failed, "failed total"):
            return Outcome.FAILURE
        if self._exceeds(current, None, total.unstable, "unstable total"):
            result = Outcome.UNSTABLE

        if previous is None:
            return result

        if self._exceeds(current, previous, new.failed, "failed new"):
            return Outcome.FAILURE
        if self._exceeds(current, previous, new.unstable, "unstable new"):
            result = Outcome.UNSTABLE

        return result

    @staticmethod
    def _exceeds(current, previous, threshold_for, label: str) -> bool:
        for severity in GATED_SEVERITIES:
            threshold = threshold_for(severity)
            if threshold is None:
                continue
            count = current.count(severity)
            baseline = previous.count(severity) if previous is not None else 0
            if count > 0 and count >= baseline + threshold:
                logger.info(
                    "Threshold reached: %s %s (count %d, previous %d, threshold %d)",
                    label, severity.value, count, baseline, threshold,
                )
                return True
        return False
