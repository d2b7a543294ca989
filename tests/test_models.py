"""Tests for models: RepositoryStatus, Repository, Report counters."""

import pytest
from pydantic import ValidationError

from mr_conflict_checker.adapters.base import APIError
from mr_conflict_checker.models import Report, Repository, RepositoryStatus


class TestRepositoryStatus:
    """Labels and predicates of RepositoryStatus."""

    def test_labels(self) -> None:
        assert RepositoryStatus.ACCESSIBLE.label == "Accessible"
        assert RepositoryStatus.ERROR.label == "Error"
        assert RepositoryStatus.NO_MRS.label == "No Release->Master MRs"
        assert RepositoryStatus.CONFLICTS.label == "Conflicts Found"
        assert str(RepositoryStatus.CONFLICTS) == "Conflicts Found"

    def test_is_error_only_for_error(self) -> None:
        assert [s for s in RepositoryStatus if s.is_error] == [RepositoryStatus.ERROR]

    def test_has_conflicts_only_for_conflicts(self) -> None:
        assert [s for s in RepositoryStatus if s.has_conflicts] == [RepositoryStatus.CONFLICTS]


class TestRepository:
    def test_defaults(self, make_repo) -> None:
        """New repository is ACCESSIBLE with no error."""
        repo = make_repo(456, "test-repository")
        assert repo.status is RepositoryStatus.ACCESSIBLE
        assert repo.error is None
        assert repo.error_message == ""

    def test_with_status_returns_copy(self, make_repo) -> None:
        """with_status leaves the original untouched."""
        repo = make_repo(1)
        err = APIError(500, "boom")
        failed = repo.with_status(RepositoryStatus.ERROR, err)
        assert failed.status is RepositoryStatus.ERROR
        assert failed.error is err
        assert failed.error_message == "API error 500: boom"
        assert repo.status is RepositoryStatus.ACCESSIBLE
        assert repo.error is None


    def test_error_status_without_error_rejected(self, make_repo) -> None:
        with pytest.raises(ValueError):
            make_repo(1).with_status(RepositoryStatus.ERROR)

    def test_error_with_non_error_status_rejected(self, make_repo) -> None:
        with pytest.raises(ValueError):
            make_repo(1).with_status(RepositoryStatus.NO_MRS, APIError(500, "boom"))

    def test_constructor_enforces_error_invariant(self) -> None:
        with pytest.raises(ValidationError):
            Repository(id=1, name="r", status=RepositoryStatus.ERROR)
        with pytest.raises(ValidationError):
            Repository(id=1, name="r", error=APIError(500, "boom"))
        repo = Repository(id=1, name="r", status=RepositoryStatus.ERROR, error=APIError(500, "boom"))
        assert repo.error_message == "API error 500: boom"


class TestReport:
    def test_add_repository_updates_counters(self, make_repo, make_mr) -> None:
        """Conflicting entries bump all counters, others only the total."""
        report = Report()
        report.add_repository(make_repo(1), [make_mr(1)], RepositoryStatus.CONFLICTS)
        assert report.get_summary_stats() == (1, 1, 1)
        assert len(report.repositories) == 1

        report.add_repository(make_repo(2), [], RepositoryStatus.NO_MRS)
        assert report.get_summary_stats() == (2, 1, 1)
        assert len(report.repositories) == 2

    def test_mrs_of_non_conflict_entries_not_counted(self, make_repo, make_mr) -> None:
        """Only CONFLICTS entries contribute to total_conflicting_mrs."""
        report = Report()
        report.add_repository(make_repo(1), [make_mr(1), make_mr(2)], RepositoryStatus.ACCESSIBLE)
        assert report.get_summary_stats() == (1, 0, 0)

    def test_counters_match_entries(self, make_repo, make_mr) -> None:
        """Counters always agree with the entries after any sequence of adds."""
        statuses = [
            RepositoryStatus.CONFLICTS,
            RepositoryStatus.ERROR,
            RepositoryStatus.NO_MRS,
            RepositoryStatus.CONFLICTS,
            RepositoryStatus.ACCESSIBLE,
        ]
        report = Report()
        for i, status in enumerate(statuses):
            mrs = [make_mr(j) for j in range(i)]
            report.add_repository(make_repo(i), mrs, status, "err" if status.is_error else "")
            conflict_entries = [e for e in report.repositories if e.status is RepositoryStatus.CONFLICTS]
            assert report.total_repositories == len(report.repositories)
            assert report.repositories_with_conflicts == len(conflict_entries)
            assert report.total_conflicting_mrs == sum(len(e.conflicting_mrs) for e in conflict_entries)
        assert report.get_summary_stats() == (5, 2, 3)

    def test_error_message_stored(self, make_repo) -> None:
        report = Report()
        report.add_repository(make_repo(3), [], RepositoryStatus.ERROR, "API error 500: boom")
        assert report.repositories[0].error_message == "API error 500: boom"
