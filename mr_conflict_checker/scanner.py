"""Repository scanner: list projects, apply the group whitelist, classify each one."""

import logging
from typing import List, Sequence

from mr_conflict_checker.adapters.base import GitPlatformAdapter, GitPlatformError, OperationCancelled
from mr_conflict_checker.models import Repository, RepositoryStatus

LOG = logging.getLogger("mr_conflict_checker.scanner")

SOURCE_BRANCH = "release"
TARGET_BRANCH = "master"


class RepositoryScanner:
    """Scans every repository reachable by the client for release->master MRs."""

    def __init__(self, client: GitPlatformAdapter, include_groups: Sequence[int] | None = None) -> None:
        self._client = client
        self._include_groups = set(include_groups or [])

    def scan_repositories(self) -> List[Repository]:
        """Return the filtered repository list, each with its status set.

        A failure to list repositories propagates; a failure for one
        repository is recorded on it as ERROR and scanning continues.
        """
        try:
            repos = self._client.list_repositories()
        except OperationCancelled:
            raise
        except GitPlatformError as e:
            LOG.error("Failed to retrieve repositories: %s", e)
            raise
        return [self._process_repository(repo) for repo in self._filter_repositories(repos)]

    def get_repository_count(self) -> int:
        """Number of repositories a scan would cover (listing + whitelist only)."""
        return len(self._filter_repositories(self._client.list_repositories()))

    def _process_repository(self, repo: Repository) -> Repository:
        repo = repo.with_status(RepositoryStatus.ACCESSIBLE)
        try:
            mrs = self._client.list_merge_requests(repo.id, SOURCE_BRANCH, TARGET_BRANCH)
        except OperationCancelled:
            raise
        except GitPlatformError as e:
            LOG.warning("Error accessing repository %s (ID: %d): %s", repo.name, repo.id, e)
            return repo.with_status(RepositoryStatus.ERROR, e)
        # Open MRs without conflicts land in NO_MRS as well
        if any(mr.has_conflicts for mr in mrs):
            return repo.with_status(RepositoryStatus.CONFLICTS)
        return repo.with_status(RepositoryStatus.NO_MRS)

    def _filter_repositories(self, repos: List[Repository]) -> List[Repository]:
        if not self._include_groups:
            return list(repos)
        filtered: List[Repository] = []
        for repo in repos:
            if repo.namespace.id in self._include_groups:
                filtered.append(repo)
            else:
                LOG.info(
                    "Excluding repository %s from group %s (ID: %d) - not in whitelist",
                    repo.name,
                    repo.namespace.name,
                    repo.namespace.id,
                )
        return filtered
