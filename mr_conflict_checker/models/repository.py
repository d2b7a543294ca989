"""GitLab project (repository) and namespace models."""

from pydantic import BaseModel, ConfigDict, Field, model_validator

from mr_conflict_checker.models.status import RepositoryStatus


class Namespace(BaseModel):
    """GitLab namespace (group or user) owning a project."""

    id: int = 0
    name: str = ""
    path: str = ""


def _check_error_matches_status(status: RepositoryStatus, error: Exception | None) -> None:
    if status.is_error and error is None:
        raise ValueError("a repository with ERROR status must carry an error")
    if not status.is_error and error is not None:
        raise ValueError(f"a repository with {status.name} status cannot carry an error")


class Repository(BaseModel):
    """GitLab project as listed by the API, plus its scan status.

    ``status`` and ``error`` are set by the scanner and analyzer. A repository
    with ERROR status always carries an error; any other status carries None.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: int
    name: str
    web_url: str = ""
    namespace: Namespace = Field(default_factory=Namespace)
    status: RepositoryStatus = RepositoryStatus.ACCESSIBLE
    error: Exception | None = None

    @model_validator(mode="after")
    def _error_matches_status(self) -> "Repository":
        _check_error_matches_status(self.status, self.error)
        return self

    @property
    def error_message(self) -> str:
        return str(self.error) if self.error is not None else ""

    def with_status(self, status: RepositoryStatus, error: Exception | None = None) -> "Repository":
        """Return a copy with the given status and error.

        Raises:
            ValueError: If status is ERROR without an error, or another status with one
        """
        # model_copy skips validators
        _check_error_matches_status(status, error)
        return self.model_copy(update={"status": status, "error": error})
