"""Dependency-Check XML report parser.

Reports are read with defusedxml, configured to refuse DTDs, entity
declarations and external references outright, so an XXE payload fails the
parse instead of being expanded into the result.

Usage::

    from dcgate.parser import parse_report

    with open("dependency-check-report.xml", "rb") as fh:
        findings = parse_report(fh)
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Union
from xml.etree.ElementTree import Element

from defusedxml import DefusedXmlException
from defusedxml.ElementTree import ParseError
from defusedxml.ElementTree import parse as safe_parse

from dcgate.exceptions import ReportParseError
from dcgate.models import (
    Analysis,
    CvssV2,
    CvssV3,
    Dependency,
    Finding,
    ProjectInfo,
    Reference,
    ScanInfo,
    Vulnerability,
)

logger = logging.getLogger(__name__)

MIN_ENGINE_MAJOR = 5

_VERSION_RE = re.compile(r"^(\d+)(?:\.(\d+))?(?:\.(\d+))?")

# XML child element -> dataclass field
CVSS_V2_FIELDS = {
    "score": "score",
    "accessVector": "access_vector",
    "accessComplexity": "access_complexity",
    "authenticationr": "authentication",
    "authentication": "authentication",
    "confidentialImpact": "confidential_impact",
    "integrityImpact": "integrity_impact",
    "availabilityImpact": "availability_impact",
    "severity": "severity",
}

CVSS_V3_FIELDS = {
    "baseScore": "base_score",
    "attackVector": "attack_vector",
    "attackComplexity": "attack_complexity",
    "privilegesRequired": "privileges_required",
    "userInteraction": "user_interaction",
    "scope": "scope",
    "confidentialityImpact": "confidentiality_impact",
    "integrityImpact": "integrity_impact",
    "availabilityImpact": "availability_impact",
    "baseSeverity": "base_severity",
}

Source = Union[str, Path, IO[bytes]]


@dataclass
class ParseResult:
    """Result of parsing one report file."""

    path: str
    findings: list[Finding] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _child(elem: Element, name: str) -> Element | None:
    for child in elem:
        if _local(child.tag) == name:
            return child
    return None


def _children(elem: Element | None, name: str) -> list[Element]:
    if elem is None:
        return []
    return [child for child in elem if _local(child.tag) == name]


def _text(elem: Element, name: str) -> str | None:
    child = _child(elem, name)
    if child is None:
        return None
    return (child.text or "").strip()


def _texts(elem: Element, container: str, name: str) -> tuple[str, ...]:
    return tuple((c.text or "").strip() for c in _children(_child(elem, container), name))


def engine_major_version(version: str | None) -> int | None:
    """Major version of an engine version string such as ``9.0.9`` or ``5.2.1-SNAPSHOT``."""
    if version is None:
        return None
    match = _VERSION_RE.match(version.strip())
    if not match:
        return None
    return int(match.group(1))


def _parse_cvss(elem: Element, name: str, fields: dict[str, str], cls):
    block = _child(elem, name)
    if block is None:
        return None
    values = {}
    for child in block:
        attr = fields.get(_local(child.tag))
        if attr:
            values[attr] = (child.text or "").strip()
    return cls(**values)


def _parse_vulnerability(elem: Element) -> Vulnerability:
    name = _text(elem, "name")
    if name is None:
        raise ReportParseError("Vulnerability element without a <name>")

    references = tuple(
        Reference(
            source=_text(ref, "source"),
            url=_text(ref, "url"),
            name=_text(ref, "name"),
        )
        for ref in _children(_child(elem, "references"), "reference")
    )

    return Vulnerability(
        name=name,
        description=_text(elem, "description"),
        severity=_text(elem, "severity"),
        source=elem.get("source") or _text(elem, "source"),
        cvss_v2=_parse_cvss(elem, "cvssV2", CVSS_V2_FIELDS, CvssV2),
        cvss_v3=_parse_cvss(elem, "cvssV3", CVSS_V3_FIELDS, CvssV3),
        references=references,
        cwes=_texts(elem, "cwes", "cwe"),
    )


def _parse_dependency(elem: Element) -> Dependency:
    vulnerabilities = [
        _parse_vulnerability(v)
        for v in _children(_child(elem, "vulnerabilities"), "vulnerability")
    ]
    return Dependency(
        file_name=_text(elem, "fileName"),
        file_path=_text(elem, "filePath"),
        md5=_text(elem, "md5"),
        sha1=_text(elem, "sha1"),
        sha256=_text(elem, "sha256"),
        description=_text(elem, "description"),
        license=_text(elem, "license"),
        project_references=_texts(elem, "projectReferences", "projectReference"),
        vulnerabilities=tuple(vulnerabilities),
    )


def _build_analysis(root: Element) -> Analysis:
    if _local(root.tag) != "analysis":
        raise ReportParseError(
            f"Input is not a Dependency-Check report file (root element <{_local(root.tag)}>)"
        )

    scan_info = None
    scan_elem = _child(root, "scanInfo")
    if scan_elem is not None:
        scan_info = ScanInfo(engine_version=_text(scan_elem, "engineVersion"))

    major = engine_major_version(scan_info.engine_version if scan_info else None)
    if major is None or major < MIN_ENGINE_MAJOR:
        raise ReportParseError("Unsupported Dependency-Check schema version detected")

    project_info = None
    project_elem = _child(root, "projectInfo")
    if project_elem is not None:
        project_info = ProjectInfo(
            name=_text(project_elem, "name"),
            report_date=_text(project_elem, "reportDate"),
            credits=_text(project_elem, "credits"),
        )

    dependencies = tuple(
        _parse_dependency(d) for d in _children(_child(root, "dependencies"), "dependency")
    )
    return Analysis(scan_info=scan_info, project_info=project_info, dependencies=dependencies)


def parse_analysis(source: Source) -> Analysis:
    """Parse a report into an :class:`Analysis`.

    ``source`` is a binary stream or a path. Raises :class:`ReportParseError`
    for malformed XML, forbidden DTD/entity constructs, documents that are not
    Dependency-Check reports, and unsupported engine versions.
    """
    try:
        tree = safe_parse(source, forbid_dtd=True, forbid_entities=True, forbid_external=True)
    except DefusedXmlException as exc:
        raise ReportParseError(f"Report contains forbidden XML constructs: {exc}") from exc
    except ParseError as exc:
        raise ReportParseError(f"Malformed XML: {exc}") from exc

    analysis = _build_analysis(tree.getroot())
    logger.debug(
        "Parsed report with %d dependencies (engine %s)",
        len(analysis.dependencies),
        analysis.scan_info.engine_version if analysis.scan_info else "unknown",
    )
    return analysis


def parse_report(source: Source) -> list[Finding]:
    """Parse a report into its findings, one per dependency/vulnerability pair."""
    return parse_analysis(source).findings()


def parse_report_file(path: str | Path) -> ParseResult:
    """Parse a report file without raising; failures are recorded on the result."""
    result = ParseResult(path=str(path))
    try:
        with open(path, "rb") as fh:
            result.findings = parse_report(fh)
    except ReportParseError as exc:
        result.error = str(exc)
    except OSError as exc:
        result.error = f"Failed to read {path}: {exc}"
    return result
