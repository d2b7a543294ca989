"""Data models for repositories, merge requests and reports (Pydantic)."""

from mr_conflict_checker.models.merge_request import Author, MergeRequest
from mr_conflict_checker.models.report import Report, RepositoryReport
from mr_conflict_checker.models.repository import Namespace, Repository
from mr_conflict_checker.models.status import RepositoryStatus

__all__ = [
    "Author",
    "MergeRequest",
    "Namespace",
    "Report",
    "Repository",
    "RepositoryReport",
    "RepositoryStatus",
]
