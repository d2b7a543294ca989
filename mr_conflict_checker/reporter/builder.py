"""Build a Report from analyzed repositories and their conflicting MRs."""

from datetime import UTC, datetime
from typing import Dict, List, Mapping, Sequence

from mr_conflict_checker.models import MergeRequest, Report, Repository

# Colons are not allowed in file names on every platform
TIMESTAMP_FORMAT = "%Y-%m-%dT%H-%M-%S"


def generate_timestamp(now: datetime | None = None) -> str:
    """UTC timestamp used in report headers and file names."""
    return (now or datetime.now(UTC)).strftime(TIMESTAMP_FORMAT)


def build_report(
    repositories: Sequence[Repository],
    conflicting_mrs: Mapping[int, List[MergeRequest]],
    timestamp: str | None = None,
) -> Report:
    """One report entry per repository, in input order."""
    report = Report(timestamp=timestamp or generate_timestamp())
    for repo in repositories:
        mrs = conflicting_mrs.get(repo.id, [])
        report.add_repository(repo, mrs, repo.status, repo.error_message)
    return report


def summarize(report: Report) -> Dict[str, int]:
    """Summary statistics keyed the way they are logged."""
    total, with_conflicts, mrs = report.get_summary_stats()
    return {
        "total_repositories": total,
        "repositories_with_conflicts": with_conflicts,
        "total_conflicting_mrs": mrs,
    }
