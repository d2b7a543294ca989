"""Conflict report: summary statistics and per-repository entries."""

from typing import List, Tuple

from pydantic import BaseModel, Field

from mr_conflict_checker.models.merge_request import MergeRequest
from mr_conflict_checker.models.repository import Repository
from mr_conflict_checker.models.status import RepositoryStatus


class RepositoryReport(BaseModel):
    """One repository's entry in the report."""

    repository: Repository
    conflicting_mrs: List[MergeRequest] = Field(default_factory=list)
    status: RepositoryStatus
    error_message: str = ""


class Report(BaseModel):
    """Report built incrementally with add_repository.

    Counters only change together with an append: repositories_with_conflicts
    counts CONFLICTS entries and total_conflicting_mrs sums their MR lists.
    """

    timestamp: str = ""
    total_repositories: int = 0
    repositories_with_conflicts: int = 0
    total_conflicting_mrs: int = 0
    repositories: List[RepositoryReport] = Field(default_factory=list)

    def add_repository(
        self,
        repo: Repository,
        conflicting_mrs: List[MergeRequest],
        status: RepositoryStatus,
        error_message: str = "",
    ) -> None:
        """Append a repository entry and update the counters."""
        self.repositories.append(
            RepositoryReport(
                repository=repo,
                conflicting_mrs=list(conflicting_mrs),
                status=status,
                error_message=error_message,
            )
        )
        self.total_repositories += 1
        if status is RepositoryStatus.CONFLICTS:
            self.repositories_with_conflicts += 1
            self.total_conflicting_mrs += len(conflicting_mrs)

    def get_summary_stats(self) -> Tuple[int, int, int]:
        """Return (total repositories, repositories with conflicts, conflicting MRs)."""
        return self.total_repositories, self.repositories_with_conflicts, self.total_conflicting_mrs
