"""Report and finding builders shared by the dcgate tests."""

from dcgate.models import Dependency, Finding, Severity, Vulnerability

NAMESPACE = "https://jeremylong.github.io/DependencyCheck/dependency-check.4.0.xsd"


def vulnerability_xml(
    name="CVE-2019-10088",
    severity="HIGH",
    source="NVD",
    description="Apache Tika memory exhaustion",
    cvss=True,
    cwes=("CWE-400",),
    references=(("MISC", "https://example.com/advisory", "advisory"),),
):
    parts = [f'<vulnerability source="{source}">', f"<name>{name}</name>"]
    if severity is not None:
        parts.append(f"<severity>{severity}</severity>")
    if cvss:
        parts.append(
            "<cvssV2><score>6.8</score><accessVector>NETWORK</accessVector>"
            "<accessComplexity>MEDIUM</accessComplexity><authenticationr>NONE</authenticationr>"
            "<confidentialImpact>PARTIAL</confidentialImpact><integrityImpact>PARTIAL</integrityImpact>"
            "<availabilityImpact>PARTIAL</availabilityImpact><severity>MEDIUM</severity></cvssV2>"
        )
        parts.append(
            "<cvssV3><baseScore>8.8</baseScore><attackVector>NETWORK</attackVector>"
            "<attackComplexity>LOW</attackComplexity><privilegesRequired>NONE</privilegesRequired>"
            "<userInteraction>REQUIRED</userInteraction><scope>UNCHANGED</scope>"
            "<confidentialityImpact>HIGH</confidentialityImpact><integrityImpact>HIGH</integrityImpact>"
            "<availabilityImpact>HIGH</availabilityImpact><baseSeverity>HIGH</baseSeverity></cvssV3>"
        )
    if cwes:
        parts.append("<cwes>" + "".join(f"<cwe>{c}</cwe>" for c in cwes) + "</cwes>")
    parts.append(f"<description>{description}</description>")
    if references:
        parts.append("<references>")
        for ref_source, url, ref_name in references:
            parts.append(
                f"<reference><source>{ref_source}</source><url>{url}</url><name>{ref_name}</name></reference>"
            )
        parts.append("</references>")
    parts.append("</vulnerability>")
    return "".join(parts)


def dependency_xml(
    file_name="tika-core-1.20.jar",
    file_path="/workspace/lib/tika-core-1.20.jar",
    sha1="aa1111",
    vulnerabilities=(),
    project_references=("example:compile",),
):
    refs = "".join(f"<projectReference>{r}</projectReference>" for r in project_references)
    return (
        '<dependency isVirtual="false">'
        f"<fileName>{file_name}</fileName>"
        f"<filePath>{file_path}</filePath>"
        "<md5>0b6e4c5d</md5>"
        f"<sha1>{sha1}</sha1>"
        "<sha256>9f86d081</sha256>"
        "<description>Library description</description>"
        "<license>Apache 2.0</license>"
        f"<projectReferences>{refs}</projectReferences>"
        "<vulnerabilities>" + "".join(vulnerabilities) + "</vulnerabilities>"
        "</dependency>"
    )


def report_xml(dependencies=(), engine_version="9.0.9", namespace=NAMESPACE):
    ns = f' xmlns="{namespace}"' if namespace else ""
    scan_info = (
        f"<scanInfo><engineVersion>{engine_version}</engineVersion></scanInfo>"
        if engine_version is not None
        else ""
    )
    return (
        '<?xml version="1.0"?>'
        f"<analysis{ns}>"
        f"{scan_info}"
        "<projectInfo><name>example</name><reportDate>2024-06-01T10:00:00Z</reportDate>"
        "<credits>NVD</credits></projectInfo>"
        "<dependencies>" + "".join(dependencies) + "</dependencies>"
        "</analysis>"
    )


def create_finding(severity: Severity, idx: int) -> Finding:
    dependency = Dependency(file_name=f"{severity.name}{idx}")
    vulnerability = Vulnerability(severity=severity.name)
    return Finding(dependency, vulnerability)


def create_findings(critical=0, high=0, medium=0, low=0, info=0, unassigned=0) -> list[Finding]:
    findings = []
    counts = [
        (Severity.CRITICAL, critical),
        (Severity.HIGH, high),
        (Severity.MEDIUM, medium),
        (Severity.LOW, low),
        (Severity.INFO, info),
        (Severity.UNASSIGNED, unassigned),
    ]
    for severity, count in counts:
        for i in range(1, count + 1):
            findings.append(create_finding(severity, i))
    return findings
