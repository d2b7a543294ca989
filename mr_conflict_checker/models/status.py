"""Repository scan status."""

from enum import Enum


class RepositoryStatus(Enum):
    """Status of a repository during scanning and analysis."""

    ACCESSIBLE = "accessible"
    ERROR = "error"
    NO_MRS = "no_mrs"
    CONFLICTS = "conflicts"

    @property
    def label(self) -> str:
        """Human-readable name used in reports."""
        return _LABELS[self]

    @property
    def is_error(self) -> bool:
        return self is RepositoryStatus.ERROR

    @property
    def has_conflicts(self) -> bool:
        return self is RepositoryStatus.CONFLICTS

    def __str__(self) -> str:
        return self.label


_LABELS = {
    RepositoryStatus.ACCESSIBLE: "Accessible",
    RepositoryStatus.ERROR: "Error",
    RepositoryStatus.NO_MRS: "No Release->Master MRs",
    RepositoryStatus.CONFLICTS: "Conflicts Found",
}
