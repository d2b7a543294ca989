"""Merge request model."""

from datetime import datetime

from pydantic import BaseModel, Field


class Author(BaseModel):
    """Author of a merge request."""

    name: str = ""
    username: str = ""
    email: str = ""


class MergeRequest(BaseModel):
    """GitLab merge request.

    ``id`` is the project-scoped ``iid``, not the global id.
    """

    id: int
    title: str = ""
    author: Author = Field(default_factory=Author)
    web_url: str = ""
    source_branch: str = ""
    target_branch: str = ""
    has_conflicts: bool = False
    created_at: datetime
    merge_status: str | None = None
    changes_count: str | None = None

    model_config = {"frozen": True}
