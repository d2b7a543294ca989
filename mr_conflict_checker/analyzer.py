"""Merge request analysis: re-check conflicting release->master MRs per repository."""

import logging
from typing import Dict, List, Sequence

from mr_conflict_checker.adapters.base import GitPlatformAdapter, GitPlatformError, OperationCancelled
from mr_conflict_checker.models import MergeRequest, Repository, RepositoryStatus
from mr_conflict_checker.scanner import SOURCE_BRANCH, TARGET_BRANCH

LOG = logging.getLogger("mr_conflict_checker.analyzer")


def filter_and_sort_conflicting_mrs(mrs: Sequence[MergeRequest]) -> List[MergeRequest]:
    """Keep conflicting release->master MRs, newest first.

    The sort is stable, so MRs created at the same instant keep their order.
    """
    conflicting = [
        mr
        for mr in mrs
        if mr.source_branch == SOURCE_BRANCH and mr.target_branch == TARGET_BRANCH and mr.has_conflicts
    ]
    return sorted(conflicting, key=lambda mr: mr.created_at, reverse=True)


def _has_real_changes(client: GitPlatformAdapter, repo: Repository, mr: MergeRequest) -> bool:
    """True unless the MR's diff is known to be empty.

    A failed lookup counts as a real conflict.
    """
    try:
        count = client.get_merge_request_change_count(repo.id, mr.id)
    except OperationCancelled:
        raise
    except GitPlatformError as e:
        LOG.debug("Change count unavailable for %s !%d, keeping it: %s", repo.name, mr.id, e)
        return True
    if count <= 0:
        LOG.info("Ignoring conflict on %s !%d: no real changes", repo.name, mr.id)
    return count > 0


def _real_conflicts(client: GitPlatformAdapter, repo: Repository, mrs: Sequence[MergeRequest]) -> List[MergeRequest]:
    return [mr for mr in filter_and_sort_conflicting_mrs(mrs) if _has_real_changes(client, repo, mr)]


def _analyze_repository(client: GitPlatformAdapter, repo: Repository) -> Repository:
    try:
        mrs = client.list_merge_requests(repo.id, SOURCE_BRANCH, TARGET_BRANCH)
    except OperationCancelled:
        raise
    except GitPlatformError as e:
        LOG.warning("Failed to fetch merge requests for repository %s: %s", repo.name, e)
        return repo.with_status(RepositoryStatus.ERROR, e)
    if _real_conflicts(client, repo, mrs):
        return repo.with_status(RepositoryStatus.CONFLICTS)
    if mrs:
        # MRs exist but none conflict
        return repo.with_status(RepositoryStatus.ACCESSIBLE)
    return repo.with_status(RepositoryStatus.NO_MRS)


def analyze_mrs(client: GitPlatformAdapter | None, repositories: Sequence[Repository]) -> List[Repository]:
    """Re-derive each repository's status from its conflicting MRs.

    Repositories already in ERROR are passed through untouched. Unlike the
    scanner, an MR list with no real conflicts leaves the repository
    ACCESSIBLE; NO_MRS means the list was empty.

    Raises:
        ValueError: If client is None
    """
    if client is None:
        raise ValueError("gitlab client cannot be None")
    analyzed: List[Repository] = []
    for repo in repositories:
        if repo.status.is_error:
            analyzed.append(repo)
            continue
        analyzed.append(_analyze_repository(client, repo))
    return analyzed


def get_conflicting_mrs(
    client: GitPlatformAdapter | None,
    repositories: Sequence[Repository],
) -> Dict[int, List[MergeRequest]]:
    """Collect the conflicting MRs of every CONFLICTS repository, keyed by repository id.

    Fetch failures skip the repository without recording an error; they are
    only logged.
    """
    if client is None:
        raise ValueError("gitlab client cannot be None")
    result: Dict[int, List[MergeRequest]] = {}
    for repo in repositories:
        if not repo.status.has_conflicts:
            continue
        try:
            mrs = client.list_merge_requests(repo.id, SOURCE_BRANCH, TARGET_BRANCH)
        except OperationCancelled:
            raise
        except GitPlatformError as e:
            LOG.warning("Skipping repository %s: failed to re-fetch merge requests: %s", repo.name, e)
            continue
        conflicts = _real_conflicts(client, repo, mrs)
        if conflicts:
            result[repo.id] = conflicts
    return result
