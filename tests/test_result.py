"""Tests for the per-build result container."""

import json

import pytest

from helpers import create_findings
from dcgate.aggregator import FindingsAggregator
from dcgate.models import Severity
from dcgate.result import BuildResult


def _result(build_number=3):
    aggregator = FindingsAggregator(build_number)
    aggregator.add_findings(create_findings(2, 1, 0, 3, 0, 1))
    return BuildResult.from_aggregator(aggregator)


class TestBuildResult:
    def test_from_aggregator(self):
        result = _result()
        assert result.build_number == 3
        assert len(result.findings) == 7
        assert result.total == 7
        assert result.count(Severity.CRITICAL) == 2
        assert result.count(Severity.LOW) == 3
        assert list(result.findings) == sorted(result.findings)

    def test_save_and_load(self, tmp_path):
        result = _result()
        path = tmp_path / "result.json"
        result.save(path)

        data = json.loads(path.read_text())
        assert data["$schema"] == "dcgate-result-v1"
        assert data["severity_distribution"]["critical"] == 2

        loaded = BuildResult.load(path)
        assert loaded.build_number == 3
        assert loaded.findings == result.findings
        assert loaded.severity_distribution == result.severity_distribution

    def test_load_distribution_only(self, tmp_path):
        path = tmp_path / "old.json"
        path.write_text(json.dumps({
            "severity_distribution": {"build_number": 9, "high": 4, "low": 1},
            "legacy_warnings": [{"name": "x"}],
        }))
        loaded = BuildResult.load(path)
        assert loaded.build_number == 9
        assert loaded.findings == ()
        assert loaded.count(Severity.HIGH) == 4
        assert loaded.total == 5

    def test_distribution_is_detached_from_aggregator(self):
        aggregator = FindingsAggregator(1)
        aggregator.add_findings(create_findings(1, 0, 0, 0, 0, 0))
        result = BuildResult.from_aggregator(aggregator)

        aggregator.add_findings(create_findings(0, 3, 0, 0, 0, 0))

        assert result.total == len(result.findings) == 1
        assert result.count(Severity.HIGH) == 0

    def test_from_dict_ignores_unknown_nested_keys(self):
        data = {
            "build_number": 2,
            "severity_distribution": {"build_number": 2, "critical": 1},
            "findings": [{
                "dependency": {"file_name": "a.jar", "checksum_tool": "x"},
                "vulnerability": {
                    "name": "CVE-1",
                    "severity": "CRITICAL",
                    "cvss_v2": {"score": "7.5", "vector": "AV:N"},
                    "cvss_v3": {"base_score": "9", "exploitability": "1"},
                    "references": [{"source": "NVD", "url": "https://x", "tags": []}],
                },
            }],
        }
        loaded = BuildResult.from_dict(data)
        vulnerability = loaded.findings[0].vulnerability
        assert vulnerability.cvss_v3.base_score == "9"
        assert vulnerability.cvss_v2.score == "7.5"
        assert vulnerability.references[0].url == "https://x"

    def test_from_dict_tolerates_nulls(self):
        loaded = BuildResult.from_dict({
            "build_number": None,
            "severity_distribution": {"build_number": 6, "high": None, "low": 2},
            "findings": None,
        })
        assert loaded.build_number == 6
        assert loaded.findings == ()
        assert loaded.count(Severity.HIGH) == 0
        assert loaded.total == 2

    def test_load_rejects_non_object(self, tmp_path):
        path = tmp_path / "result.json"
        path.write_text("[1, 2]")
        with pytest.raises(ValueError, match="must be a JSON object"):
            BuildResult.load(path)
