"""Render the frozen report as console text or a JSON document."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List

from .result import OverallReport, ProjectReport, ResultKind

KIND_LABELS = {
    ResultKind.PASS: "PASS",
    ResultKind.FAIL: "FAIL",
    ResultKind.SKIP: "SKIP",
    ResultKind.ENGINE_ERROR: "ERROR",
}


def format_project_text(report: ProjectReport, verbose: bool = False) -> str:
    """List the outcomes of one project; passes are only shown when verbose."""

    lines: List[str] = []
    lines.append(f"Checking {report.project_type} in {report.project}")
    for outcome in report.outcomes:
        if outcome.kind is ResultKind.PASS and not verbose:
            continue
        line = f"  [{KIND_LABELS[outcome.kind]}] {outcome.rule_id} ({outcome.severity.value})"
        if outcome.diagnostic:
            line += f": {outcome.diagnostic}"
        lines.append(line)
    lines.append(f"  Verdict: {report.verdict.value.upper()}")
    return "\n".join(lines)


def format_summary_text(report: OverallReport) -> str:
    """Create a human-readable summary table for console output."""

    lines: List[str] = []
    lines.append("Check Summary")
    lines.append("=" * 40)
    header = f"{'Result':<12} | {'Count':>5}"
    lines.append(header)
    lines.append("-" * len(header))
    for kind, count in report.summary.as_rows():
        lines.append(f"{kind:<12} | {count:>5}")
    lines.append("-" * len(header))
    failing = [project for project in report.projects if not project.passed]
    lines.append(f"Projects  : {len(report.projects)} ({len(failing)} failing)")
    lines.append(f"Status    : {report.verdict.value.upper()}")
    if not report.complete:
        lines.append("Note      : run was cancelled, report is incomplete")
    for project in failing:
        lines.append(f"  FAIL {project.project}")
    return "\n".join(lines)


def to_json(report: OverallReport) -> str:
    return json.dumps(report.to_dict(), indent=2)


def write_report(report: OverallReport, output_path: Path) -> None:
    output_file = Path(output_path)
    output_file.parent.mkdir(parents=True, exist_ok=True)
    output_file.write_text(to_json(report), encoding="utf-8")
