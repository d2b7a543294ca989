"""Shared fixtures: in-memory GitLab client and model factories."""

from datetime import UTC, datetime, timedelta
from typing import Callable, Dict, List

import pytest

from mr_conflict_checker.adapters.base import GitPlatformAdapter, GitPlatformError
from mr_conflict_checker.models import Author, MergeRequest, Namespace, Repository

BASE_TIME = datetime(2024, 1, 15, 10, 0, 0, tzinfo=UTC)


class FakeClient(GitPlatformAdapter):
    """Client returning canned data; an Exception value is raised instead."""

    def __init__(
        self,
        repositories: List[Repository] | Exception | None = None,
        merge_requests: Dict[int, List[MergeRequest] | Exception] | None = None,
        change_counts: Dict[tuple, int | Exception] | None = None,
    ) -> None:
        self.repositories = repositories if repositories is not None else []
        self.merge_requests = merge_requests or {}
        self.change_counts = change_counts or {}
        self.calls: List[tuple] = []

    def test_connection(self) -> None:
        self.calls.append(("test_connection",))

    def list_repositories(self) -> List[Repository]:
        self.calls.append(("list_repositories",))
        if isinstance(self.repositories, Exception):
            raise self.repositories
        return list(self.repositories)

    def list_merge_requests(self, repo_id: int, source_branch: str = "", target_branch: str = "") -> List[MergeRequest]:
        self.calls.append(("list_merge_requests", repo_id, source_branch, target_branch))
        value = self.merge_requests.get(repo_id, [])
        if isinstance(value, Exception):
            raise value
        return list(value)

    def get_merge_request(self, repo_id: int, mr_id: int) -> MergeRequest:
        for mr in self.merge_requests.get(repo_id, []):
            if mr.id == mr_id:
                return mr
        raise GitPlatformError(f"Not found: !{mr_id}")

    def get_merge_request_change_count(self, repo_id: int, mr_id: int) -> int:
        self.calls.append(("get_merge_request_change_count", repo_id, mr_id))
        value = self.change_counts.get((repo_id, mr_id), 1)
        if isinstance(value, Exception):
            raise value
        return value


def build_repo(repo_id: int, name: str | None = None, namespace_id: int = 1) -> Repository:
    return Repository(
        id=repo_id,
        name=name or f"repo-{repo_id}",
        web_url=f"https://gitlab.example.com/group/repo-{repo_id}",
        namespace=Namespace(id=namespace_id, name=f"group-{namespace_id}", path=f"group-{namespace_id}"),
    )


def build_mr(
    mr_id: int,
    has_conflicts: bool = True,
    minutes: int = 0,
    source_branch: str = "release",
    target_branch: str = "master",
) -> MergeRequest:
    return MergeRequest(
        id=mr_id,
        title=f"Release {mr_id}",
        author=Author(name="John Doe", username="johndoe", email="john@example.com"),
        web_url=f"https://gitlab.example.com/group/repo/-/merge_requests/{mr_id}",
        source_branch=source_branch,
        target_branch=target_branch,
        has_conflicts=has_conflicts,
        created_at=BASE_TIME + timedelta(minutes=minutes),
    )


@pytest.fixture
def make_repo() -> Callable[..., Repository]:
    return build_repo


@pytest.fixture
def make_mr() -> Callable[..., MergeRequest]:
    return build_mr


@pytest.fixture
def fake_client_cls() -> type:
    return FakeClient
