"""Report generation - rich terminal tables and JSON output."""

from __future__ import annotations

import json
from datetime import datetime

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from dcgate.gate import Outcome
from dcgate.models import Finding, Severity
from dcgate.publisher import PublishOutcome

SEVERITY_COLORS = {
    Severity.CRITICAL: "bold red",
    Severity.HIGH: "red",
    Severity.MEDIUM: "yellow",
    Severity.LOW: "cyan",
    Severity.INFO: "dim",
    Severity.UNASSIGNED: "dim",
}

OUTCOME_COLORS = {
    Outcome.SUCCESS: "bold green",
    Outcome.UNSTABLE: "bold yellow",
    Outcome.FAILURE: "bold red",
}


def render_findings(findings: list[Finding], console: Console | None = None) -> None:
    console = console or Console()
    if not findings:
        console.print("\n[bold green]No vulnerabilities reported.[/]")
        return

    table = Table(title="Dependency-Check Findings", show_lines=True)
    table.add_column("Severity", width=10)
    table.add_column("File", width=30)
    table.add_column("Vulnerability", width=22)
    table.add_column("Source", width=10)
    table.add_column("CWE", width=10)

    # worst first, ties keep the finding order
    for f in sorted(findings, key=lambda f: f.normalized_severity.rank, reverse=True):
        sev = f.normalized_severity
        color = SEVERITY_COLORS[sev]
        table.add_row(
            f"[{color}]{sev.value}[/]",
            escape(f.dependency.file_name or ""),
            escape(f.vulnerability.name or ""),
            escape(f.vulnerability.source or ""),
            escape(f.vulnerability.cwes[0]) if f.vulnerability.cwes else "",
        )

    console.print()
    console.print(table)


def render_table(published: PublishOutcome, console: Console | None = None) -> None:
    console = console or Console()
    result = published.result

    if result is None:
        console.print("\n[bold yellow]No Dependency-Check reports found.[/]")
    else:
        render_findings(list(result.findings), console)
        _print_summary(console, published)

    for failed in published.parse_errors:
        console.print(f"[red]Could not parse {escape(failed.path)}:[/] {escape(failed.error or '')}")

    color = OUTCOME_COLORS[published.outcome]
    console.print(f"\n[bold]Build result:[/] [{color}]{published.outcome.value}[/]\n")


def _print_summary(console: Console, published: PublishOutcome) -> None:
    distribution = published.result.severity_distribution
    parts = []
    for sev in Severity:
        count = distribution.count(sev)
        if count > 0:
            color = SEVERITY_COLORS[sev]
            parts.append(f"[{color}]{sev.value}: {count}[/]")

    console.print(f"\n[bold]Summary:[/] {distribution.total} finding(s) | {' | '.join(parts) if parts else 'Clean'}")
    console.print(f"Reports parsed: {len(published.report_files) - len(published.parse_errors)}"
                  f" of {len(published.report_files)} | Build: #{distribution.build_number}")


def render_json(published: PublishOutcome) -> str:
    output = {
        "$schema": "dcgate-v1",
        "generated_at": datetime.now().isoformat(),
        "outcome": published.outcome.value,
        "report_files": published.report_files,
        "parse_errors": [{"path": p.path, "error": p.error} for p in published.parse_errors],
        "summary": {"total": 0},
        "findings": [],
    }

    if published.result is not None:
        distribution = published.result.severity_distribution
        output["summary"] = {
            "total": distribution.total,
            "build_number": distribution.build_number,
            "by_severity": {s.value: distribution.count(s) for s in Severity},
        }
        output["findings"] = [f.to_dict() for f in published.result.findings]

    return json.dumps(output, indent=2)
