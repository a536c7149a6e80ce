"""Publisher: turn the report files of one build into a gated result.

This is the glue a CI job calls. It selects report files in a workspace,
parses them one by one, aggregates their findings, and runs the risk gate
against the previous build's distribution.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from dcgate.aggregator import FindingsAggregator
from dcgate.config import Config, validate_pattern
from dcgate.exceptions import ThresholdsExceededError
from dcgate.gate import Outcome, RiskGate
from dcgate.parser import ParseResult, parse_report_file
from dcgate.result import BuildResult

logger = logging.getLogger(__name__)


@dataclass
class PublishOutcome:
    result: BuildResult | None
    outcome: Outcome
    report_files: list[str] = field(default_factory=list)
    parse_errors: list[ParseResult] = field(default_factory=list)


class Publisher:
    def __init__(self, config: Config | None = None):
        self.config = config or Config()

    def find_reports(self, workspace: str | Path) -> list[Path]:
        root = Path(workspace)
        pattern = validate_pattern(self.config.pattern)
        return sorted(p for p in root.glob(pattern) if p.is_file())

    def publish(
        self,
        workspace: str | Path,
        build_number: int = 0,
        previous: BuildResult | None = None,
    ) -> PublishOutcome:
        """Process the reports of one build and evaluate them against the thresholds.

        ``previous`` is the stored result of the previous build, or ``None`` on
        a first run, in which case only total thresholds apply. Raises
        :class:`ThresholdsExceededError` when the build fails and
        ``stop_build`` is configured.
        """
        logger.info("Collecting Dependency-Check reports matching %s", self.config.pattern)
        report_files = self.find_reports(workspace)

        if not report_files:
            logger.warning("No Dependency-Check reports found in %s", workspace)
            outcome = Outcome.SUCCESS if self.config.ignore_no_results else Outcome.UNSTABLE
            return PublishOutcome(result=None, outcome=outcome)

        aggregator = FindingsAggregator(build_number)
        parse_errors: list[ParseResult] = []
        for path in report_files:
            logger.info("Parsing file %s", path)
            parsed = parse_report_file(path)
            if not parsed.ok:
                logger.error("Unable to parse %s: %s", path, parsed.error)
                parse_errors.append(parsed)
                continue
            aggregator.add_findings(parsed.findings)

        result = BuildResult.from_aggregator(aggregator)
        gate = RiskGate(self.config.thresholds)
        previous_distribution = previous.severity_distribution if previous else None
        outcome = gate.evaluate(previous_distribution, result.severity_distribution)

        published = PublishOutcome(
            result=result,
            outcome=outcome,
            report_files=[str(p) for p in report_files],
            parse_errors=parse_errors,
        )

        if outcome.is_worse_than(Outcome.SUCCESS):
            logger.warning("Vulnerability thresholds exceeded: build is %s", outcome.value)
        if outcome is Outcome.FAILURE and self.config.stop_build:
            raise ThresholdsExceededError(published)
        return published
