"""Data models for Dependency-Check findings and severity distributions."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from functools import total_ordering


class Severity(Enum):
    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
    INFO = "INFO"
    UNASSIGNED = "UNASSIGNED"

    @property
    def rank(self) -> int:
        return {
            Severity.CRITICAL: 5,
            Severity.HIGH: 4,
            Severity.MEDIUM: 3,
            Severity.LOW: 2,
            Severity.INFO: 1,
            Severity.UNASSIGNED: 0,
        }[self]

    @classmethod
    def from_string(cls, value: str | None) -> Severity:
        """Normalise a scanner-reported severity. Never raises."""
        if value is None:
            return cls.UNASSIGNED
        key = str(value).strip().upper()
        if key in _SYNONYMS:
            return _SYNONYMS[key]
        try:
            return cls(key)
        except ValueError:
            return cls.UNASSIGNED

    def is_at_least(self, other: Severity) -> bool:
        return self.rank >= other.rank

    def __ge__(self, other: Severity) -> bool:
        return self.rank >= other.rank

    def __gt__(self, other: Severity) -> bool:
        return self.rank > other.rank

    def __le__(self, other: Severity) -> bool:
        return self.rank <= other.rank

    def __lt__(self, other: Severity) -> bool:
        return self.rank < other.rank


_SYNONYMS = {
    "MODERATE": Severity.MEDIUM,
    "INFORMATIONAL": Severity.INFO,
    "UNKNOWN": Severity.UNASSIGNED,
}


def _sort_key(*values: str | None) -> tuple:
    # None sorts before any string
    return tuple((v is not None, v or "") for v in values)


def _known_fields(cls, data: dict | None) -> dict:
    # stored results may carry keys a newer writer added
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in (data or {}).items() if k in names}


@dataclass(frozen=True)
class Reference:
    source: str | None = None
    url: str | None = None
    name: str | None = None

    def to_dict(self) -> dict:
        return {"source": self.source, "url": self.url, "name": self.name}


@dataclass(frozen=True)
class CvssV2:
    """CVSS v2 block, kept exactly as reported."""

    score: str | None = None
    access_vector: str | None = None
    access_complexity: str | None = None
    authentication: str | None = None
    confidential_impact: str | None = None
    integrity_impact: str | None = None
    availability_impact: str | None = None
    severity: str | None = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class CvssV3:
    """CVSS v3 block, kept exactly as reported."""

    base_score: str | None = None
    attack_vector: str | None = None
    attack_complexity: str | None = None
    privileges_required: str | None = None
    user_interaction: str | None = None
    scope: str | None = None
    confidentiality_impact: str | None = None
    integrity_impact: str | None = None
    availability_impact: str | None = None
    base_severity: str | None = None

    def to_dict(self) -> dict:
        return asdict(self)


@total_ordering
@dataclass(frozen=True, eq=False)
class Vulnerability:
    name: str | None = None
    description: str | None = None
    severity: str | None = None
    source: str | None = None
    cvss_v2: CvssV2 | None = None
    cvss_v3: CvssV3 | None = None
    references: tuple[Reference, ...] = ()
    cwes: tuple[str, ...] = ()

    @property
    def normalized_severity(self) -> Severity:
        return Severity.from_string(self.severity)

    @property
    def key(self) -> tuple:
        return _sort_key(self.name, self.source, self.severity, self.description)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vulnerability):
            return NotImplemented
        return self.key == other.key

    def __lt__(self, other: Vulnerability) -> bool:
        if not isinstance(other, Vulnerability):
            return NotImplemented
        return self.key < other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "severity": self.severity,
            "source": self.source,
            "cvss_v2": self.cvss_v2.to_dict() if self.cvss_v2 else None,
            "cvss_v3": self.cvss_v3.to_dict() if self.cvss_v3 else None,
            "references": [r.to_dict() for r in self.references],
            "cwes": list(self.cwes),
        }

    @classmethod
    def from_dict(cls, data: dict) -> Vulnerability:
        cvss_v2 = data.get("cvss_v2")
        cvss_v3 = data.get("cvss_v3")
        return cls(
            name=data.get("name"),
            description=data.get("description"),
            severity=data.get("severity"),
            source=data.get("source"),
            cvss_v2=CvssV2(**_known_fields(CvssV2, cvss_v2)) if cvss_v2 else None,
            cvss_v3=CvssV3(**_known_fields(CvssV3, cvss_v3)) if cvss_v3 else None,
            references=tuple(Reference(**_known_fields(Reference, r)) for r in data.get("references") or []),
            cwes=tuple(data.get("cwes") or []),
        )


@total_ordering
@dataclass(frozen=True, eq=False)
class Dependency:
    """A scanned file. Identity is the file name, path and hashes."""

    file_name: str | None = None
    file_path: str | None = None
    md5: str | None = None
    sha1: str | None = None
    sha256: str | None = None
    description: str | None = None
    license: str | None = None
    project_references: tuple[str, ...] = ()
    vulnerabilities: tuple[Vulnerability, ...] = field(default=(), repr=False)

    @property
    def key(self) -> tuple:
        return _sort_key(self.file_name, self.file_path, self.md5, self.sha1, self.sha256)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Dependency):
            return NotImplemented
        return self.key == other.key

    def __lt__(self, other: Dependency) -> bool:
        if not isinstance(other, Dependency):
            return NotImplemented
        return self.key < other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def to_dict(self) -> dict:
        # vulnerabilities are carried by the findings, not repeated here
        return {
            "file_name": self.file_name,
            "file_path": self.file_path,
            "md5": self.md5,
            "sha1": self.sha1,
            "sha256": self.sha256,
            "description": self.description,
            "license": self.license,
            "project_references": list(self.project_references),
        }

    @classmethod
    def from_dict(cls, data: dict) -> Dependency:
        return cls(
            file_name=data.get("file_name"),
            file_path=data.get("file_path"),
            md5=data.get("md5"),
            sha1=data.get("sha1"),
            sha256=data.get("sha256"),
            description=data.get("description"),
            license=data.get("license"),
            project_references=tuple(data.get("project_references") or []),
        )


@total_ordering
@dataclass(frozen=True, eq=False)
class Finding:
    """One vulnerability reported against one dependency."""

    dependency: Dependency
    vulnerability: Vulnerability

    @property
    def normalized_severity(self) -> Severity:
        return self.vulnerability.normalized_severity

    @property
    def key(self) -> tuple:
        return (self.dependency.key, self.vulnerability.key)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Finding):
            return NotImplemented
        return self.key == other.key

    def __lt__(self, other: Finding) -> bool:
        if not isinstance(other, Finding):
            return NotImplemented
        return self.key < other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def to_dict(self) -> dict:
        return {
            "dependency": self.dependency.to_dict(),
            "vulnerability": self.vulnerability.to_dict(),
            "severity": self.normalized_severity.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Finding:
        return cls(
            dependency=Dependency.from_dict(data.get("dependency") or {}),
            vulnerability=Vulnerability.from_dict(data.get("vulnerability") or {}),
        )


@dataclass
class SeverityDistribution:
    build_number: int = 0
    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0
    info: int = 0
    unassigned: int = 0

    def add(self, severity: Severity) -> None:
        attr = severity.value.lower()
        setattr(self, attr, getattr(self, attr) + 1)

    def count(self, severity: Severity) -> int:
        return getattr(self, severity.value.lower())

    @property
    def total(self) -> int:
        return sum(self.count(s) for s in Severity)

    def to_dict(self) -> dict:
        return {
            "build_number": self.build_number,
            "critical": self.critical,
            "high": self.high,
            "medium": self.medium,
            "low": self.low,
            "info": self.info,
            "unassigned": self.unassigned,
        }

    @classmethod
    def from_dict(cls, data: dict) -> SeverityDistribution:
        return cls(
            build_number=int(data.get("build_number") or 0),
            **{s.value.lower(): int(data.get(s.value.lower()) or 0) for s in Severity},
        )


@dataclass(frozen=True)
class ScanInfo:
    engine_version: str | None = None


@dataclass(frozen=True)
class ProjectInfo:
    name: str | None = None
    report_date: str | None = None
    credits: str | None = None


@dataclass(frozen=True)
class Analysis:
    """A whole parsed report."""

    scan_info: ScanInfo | None = None
    project_info: ProjectInfo | None = None
    dependencies: tuple[Dependency, ...] = ()

    def findings(self) -> list[Finding]:
        """Flatten dependencies into findings, in document order."""
        return [
            Finding(dependency, vulnerability)
            for dependency in self.dependencies
            for vulnerability in dependency.vulnerabilities
        ]
