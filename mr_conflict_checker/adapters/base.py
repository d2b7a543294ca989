"""Abstract base class for Git platform adapters and the client error types."""

from abc import ABC, abstractmethod
from typing import List

from mr_conflict_checker.models import MergeRequest, Repository


class GitPlatformError(Exception):
    """Raised when a Git platform API call fails."""

    pass


class AuthenticationFailed(GitPlatformError):
    """Token rejected by the platform (HTTP 401)."""

    def __init__(self, message: str = "authentication failed: invalid token") -> None:
        super().__init__(message)


class RateLimited(GitPlatformError):
    """Platform throttled the request (HTTP 429). Not retried."""

    def __init__(self, message: str = "rate limit exceeded") -> None:
        super().__init__(message)


class APIError(GitPlatformError):
    """Any other HTTP error status."""

    def __init__(self, status: int, body: str) -> None:
        self.status = status
        self.body = body
        super().__init__(f"API error {status}: {body}")


class TransportError(GitPlatformError):
    """Network-level failure (timeout, connection refused, DNS)."""

    def __init__(self, cause: Exception) -> None:
        self.cause = cause
        super().__init__(f"request failed: {cause}")


class OperationCancelled(GitPlatformError):
    """The caller's cancellation event fired before the request was issued."""

    def __init__(self, message: str = "operation cancelled") -> None:
        super().__init__(message)


class GitPlatformAdapter(ABC):
    """Read-only interface used by the scanner and analyzer."""

    @abstractmethod
    def test_connection(self) -> None:
        """Verify the token against the platform.

        Raises:
            AuthenticationFailed: If the token is rejected
            GitPlatformError: On any other failure
        """
        pass

    @abstractmethod
    def list_repositories(self) -> List[Repository]:
        """List every repository the token is a member of, in API order."""
        pass

    @abstractmethod
    def list_merge_requests(
        self,
        repo_id: int,
        source_branch: str = "",
        target_branch: str = "",
    ) -> List[MergeRequest]:
        """List open merge requests of a repository.

        Args:
            repo_id: Project id
            source_branch: Optional server-side source branch filter
            target_branch: Optional server-side target branch filter

        Returns:
            List of MergeRequest, all pages concatenated
        """
        pass

    @abstractmethod
    def get_merge_request(self, repo_id: int, mr_id: int) -> MergeRequest:
        """Fetch a single merge request by its project-scoped id."""
        pass

    @abstractmethod
    def get_merge_request_change_count(self, repo_id: int, mr_id: int) -> int:
        """Count file changes of a merge request that carry real content.

        New, renamed and deleted files count, as does any entry whose diff
        has non-whitespace text.
        """
        pass

    def close(self) -> None:
        """Release resources held by the adapter."""
        pass
