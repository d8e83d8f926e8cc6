"""Read a findings report produced by the analysis step.

The report is YAML or JSON (JSON is valid YAML, so one loader handles both):

    resources:
      - scope: FIL
        qualified_name: pl.touk.Foo
        name: Foo.java
        findings:
          - rule_repository: pmd
            rule: UnusedLocalVariable
            severity: MAJOR
            message: Avoid unused local variables
            line: 12

A bare top-level list of resources is accepted as well.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from gerritlens_core.errors import ReportError
from gerritlens_core.models import Finding, Resource, ScopeKind


@dataclass(frozen=True)
class ReportEntry:
    resource: Resource
    findings: list[Finding] = field(default_factory=list)


def _parse_line(value) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ReportError(f"Finding line must be an integer, got {value!r}")


def _parse_finding(raw) -> Finding:
    if not isinstance(raw, dict):
        raise ReportError(f"Finding must be a mapping, got {type(raw).__name__}")
    return Finding(
        rule_repository=str(raw.get("rule_repository", raw.get("repository", ""))),
        rule=str(raw.get("rule", "")),
        severity=str(raw.get("severity", "")),
        message=str(raw.get("message", "")),
        line=_parse_line(raw.get("line")),
    )


def _parse_entry(raw) -> ReportEntry:
    if not isinstance(raw, dict):
        raise ReportError(f"Resource must be a mapping, got {type(raw).__name__}")
    try:
        scope = ScopeKind.parse(raw.get("scope", ScopeKind.FILE.value))
    except ValueError as e:
        raise ReportError(str(e)) from e
    name = raw.get("qualified_name", raw.get("long_name"))
    if not name:
        raise ReportError("Resource is missing qualified_name")
    findings = raw.get("findings") or []
    if not isinstance(findings, list):
        raise ReportError(f"Findings of {name} must be a list")
    return ReportEntry(
        resource=Resource(scope=scope, qualified_name=str(name), name=str(raw.get("name", ""))),
        findings=[_parse_finding(f) for f in findings],
    )


def parse_report(data) -> list[ReportEntry]:
    if data is None:
        return []
    if isinstance(data, dict):
        data = data.get("resources") or []
    if not isinstance(data, list):
        raise ReportError("Report must be a list of resources or a mapping with a 'resources' key")
    return [_parse_entry(raw) for raw in data]


def load_report(report_path: str) -> list[ReportEntry]:
    path = Path(report_path)
    if not path.exists():
        raise ReportError(f"Report file not found: {report_path}")
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ReportError(f"Could not parse report {report_path}: {e}") from e
    return parse_report(data)
