"""Per-build result: aggregated findings plus their severity distribution."""

from __future__ import annotations

import json
from dataclasses import dataclass, replace
from datetime import datetime
from pathlib import Path

from dcgate.aggregator import FindingsAggregator
from dcgate.models import Finding, Severity, SeverityDistribution

RESULT_SCHEMA = "dcgate-result-v1"


@dataclass(frozen=True)
class BuildResult:
    build_number: int
    findings: tuple[Finding, ...]
    severity_distribution: SeverityDistribution

    @classmethod
    def from_aggregator(cls, aggregator: FindingsAggregator) -> BuildResult:
        distribution = replace(aggregator.severity_distribution)
        return cls(
            build_number=distribution.build_number,
            findings=tuple(aggregator.aggregated_findings),
            severity_distribution=distribution,
        )

    def count(self, severity: Severity) -> int:
        return self.severity_distribution.count(severity)

    @property
    def total(self) -> int:
        return self.severity_distribution.total

    def to_dict(self) -> dict:
        return {
            "$schema": RESULT_SCHEMA,
            "generated_at": datetime.now().isoformat(),
            "build_number": self.build_number,
            "severity_distribution": self.severity_distribution.to_dict(),
            "findings": [f.to_dict() for f in self.findings],
        }

    @classmethod
    def from_dict(cls, data: dict) -> BuildResult:
        """Rebuild a result; files that only stored the distribution load with no findings."""
        distribution = SeverityDistribution.from_dict(data.get("severity_distribution") or {})
        build_number = int(data.get("build_number") or distribution.build_number)
        findings = tuple(Finding.from_dict(f) for f in data.get("findings") or [])
        return cls(
            build_number=build_number,
            findings=findings,
            severity_distribution=distribution,
        )

    def save(self, path: str | Path) -> None:
        Path(path).write_text(json.dumps(self.to_dict(), indent=2))

    @classmethod
    def load(cls, path: str | Path) -> BuildResult:
        data = json.loads(Path(path).read_text())
        if not isinstance(data, dict):
            raise ValueError(f"Build result {path} must be a JSON object")
        return cls.from_dict(data)
