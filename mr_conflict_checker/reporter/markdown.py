"""Render a Report as markdown and write it to the output directory."""

import logging
from pathlib import Path

from mr_conflict_checker.models import Report, RepositoryReport, RepositoryStatus
from mr_conflict_checker.reporter.builder import generate_timestamp

LOG = logging.getLogger("mr_conflict_checker.reporter.markdown")

FILENAME_PREFIX = "MR-conflict-"
CONFLICT_MARK = "❌"
CREATED_FORMAT = "%Y-%m-%d %H:%M:%S"


def _repository_section(entry: RepositoryReport) -> list[str]:
    repo = entry.repository
    mark = f" {CONFLICT_MARK}" if entry.status is RepositoryStatus.CONFLICTS else ""
    lines = [
        f"### [{repo.name}]({repo.web_url}){mark}",
        f"**Status**: {entry.status.label}",
    ]
    if entry.error_message:
        lines.append(f"**Error**: {entry.error_message}")
    if entry.conflicting_mrs:
        lines.append("")
        lines.append("#### Conflicting Merge Requests")
        for mr in sorted(entry.conflicting_mrs, key=lambda m: m.created_at, reverse=True):
            lines.append(
                f"- {CONFLICT_MARK} [{mr.title}]({mr.web_url}) - Author: {mr.author.name}"
                f" - Created: {mr.created_at.strftime(CREATED_FORMAT)}"
            )
    lines.append("")
    return lines


def render_markdown(report: Report) -> str:
    """Convert a Report to a single markdown document.

    Output: header with the run timestamp, summary statistics, then one
    section per repository sorted by name.
    """
    lines = [
        f"# MR Conflict Report - {report.timestamp}",
        "",
        "## Summary",
        f"- Total Repositories Scanned: {report.total_repositories}",
        f"- Repositories with Conflicts: {report.repositories_with_conflicts}",
        f"- Total Conflicting MRs: {report.total_conflicting_mrs}",
        "",
        "## Repository Details",
        "",
    ]
    for entry in sorted(report.repositories, key=lambda e: e.repository.name):
        lines.extend(_repository_section(entry))
    return "\n".join(lines)


def _unique_path(path: Path) -> Path:
    """Append _1, _2, ... before the extension until the name is free."""
    if not path.exists():
        return path
    counter = 1
    while True:
        candidate = path.with_name(f"{path.stem}_{counter}{path.suffix}")
        if not candidate.exists():
            return candidate
        counter += 1


def generate_report(report: Report, output_dir: Path | str) -> Path:
    """Write the report as MR-conflict-<timestamp>.md and return its path.

    The report timestamp is set if empty. The output directory is created
    when missing.
    """
    timestamp = generate_timestamp()
    if not report.timestamp:
        report.timestamp = timestamp
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    path = _unique_path(out / f"{FILENAME_PREFIX}{timestamp}.md")
    path.write_text(render_markdown(report), encoding="utf-8")
    LOG.debug("Report written to %s", path)
    return path
