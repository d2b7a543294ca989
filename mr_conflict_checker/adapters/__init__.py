"""Git platform adapters (base and GitLab implementation)."""

from mr_conflict_checker.adapters.base import (
    APIError,
    AuthenticationFailed,
    GitPlatformAdapter,
    GitPlatformError,
    OperationCancelled,
    RateLimited,
    TransportError,
)
from mr_conflict_checker.adapters.gitlab import GitLabAdapter
from mr_conflict_checker.adapters.rate_limiter import RateLimiter

__all__ = [
    "APIError",
    "AuthenticationFailed",
    "GitLabAdapter",
    "GitPlatformAdapter",
    "GitPlatformError",
    "OperationCancelled",
    "RateLimited",
    "RateLimiter",
    "TransportError",
]
