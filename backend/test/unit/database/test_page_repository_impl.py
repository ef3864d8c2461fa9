import pytest
from unittest.mock import Mock

from linkvalidator.validation.infrastructure.database.page_repository_impl import PageRepositoryImpl
from linkvalidator.validation.infrastructure.database.sqlalchemy_link_dao_impl import SqlAlchemyLinkDaoImpl
from linkvalidator.validation.domain.value_objects.page import Page
from linkvalidator.validation.domain.value_objects.probe_outcome import NetworkErrorKind, ProbeOutcome


@pytest.fixture
def repository(session):
    return PageRepositoryImpl(SqlAlchemyLinkDaoImpl(session))


class TestPageRepositoryImpl:

    def test_create_and_find_page(self, repository):
        page_id = repository.create_page("https://example.com/docs")

        page = repository.find_page(page_id)

        assert isinstance(page, Page)
        assert page.id == page_id
        assert page.url == "https://example.com/docs"
        assert page.created_at is not None

    def test_page_ids_are_unique(self, repository):
        first = repository.create_page("http://example.com")
        second = repository.create_page("http://example.com")
        assert first != second

    @pytest.mark.parametrize("url", ["", "/relative", "ftp://example.com", "example.com", None])
    def test_create_page_rejects_non_absolute_url(self, repository, url):
        with pytest.raises(ValueError):
            repository.create_page(url)

    def test_find_missing_page(self, repository):
        assert repository.find_page("no-such-page") is None

    def test_link_results_round_trip_outcomes(self, repository):
        page_id = repository.create_page("http://example.com")

        repository.create_link_result(page_id, "run-1", "http://example.com/ok", ProbeOutcome.http(200))
        repository.create_link_result(page_id, "run-1", "http://example.com/gone", ProbeOutcome.http(404))
        repository.create_link_result(
            page_id, "run-1", "http://slow.example.com",
            ProbeOutcome.network_error(NetworkErrorKind.TIMEOUT)
        )

        results = repository.get_link_results(page_id)

        assert [r.outcome for r in results] == [
            ProbeOutcome.http(200),
            ProbeOutcome.http(404),
            ProbeOutcome.network_error(NetworkErrorKind.TIMEOUT),
        ]
        assert all(r.page_id == page_id and r.run_id == "run-1" for r in results)
        assert all(r.id is not None and r.checked_at is not None for r in results)

    def test_create_link_result_rejects_relative_url(self, repository):
        page_id = repository.create_page("http://example.com")
        with pytest.raises(ValueError):
            repository.create_link_result(page_id, "run-1", "/not-normalized", ProbeOutcome.http(200))
        assert repository.get_link_results(page_id) == []

    def test_runs_are_kept_apart(self, repository):
        page_id = repository.create_page("http://example.com")
        repository.create_link_result(page_id, "run-1", "http://example.com/a", ProbeOutcome.http(500))
        repository.create_link_result(page_id, "run-2", "http://example.com/a", ProbeOutcome.http(200))
        repository.record_run(page_id, "run-1", 1)
        repository.record_run(page_id, "run-2", 1)

        assert repository.get_run_ids(page_id) == ["run-1", "run-2"]
        latest = repository.get_link_results(page_id, "run-2")
        assert [r.outcome.status_code for r in latest] == [200]

    def test_store_errors_propagate(self):
        dao = Mock()
        dao.add_link_result.side_effect = RuntimeError("db down")
        repository = PageRepositoryImpl(dao)

        with pytest.raises(RuntimeError):
            repository.create_link_result("p", "r", "http://example.com", ProbeOutcome.http(200))

    def test_record_run_with_zero_results(self, repository):
        page_id = repository.create_page("http://example.com")
        repository.create_link_result(page_id, "run-1", "http://example.com/a", ProbeOutcome.http(404))
        repository.record_run(page_id, "run-1", 1)
        repository.record_run(page_id, "run-2", 0)

        assert repository.get_run_ids(page_id) == ["run-1", "run-2"]
        assert repository.get_link_results(page_id, "run-2") == []
