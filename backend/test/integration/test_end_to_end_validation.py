"""
端到端测试：提交服务 + 作业队列 + 作业服务 + SQLite 存储
网络由 requests_mock 替换
"""

import pytest
import requests
import requests_mock

from linkvalidator.bootstrap import create_link_validation_app
from linkvalidator.validation.domain.value_objects.probe_outcome import NetworkErrorKind, ProbeOutcome
from linkvalidator.validation.domain.value_objects.validation_config import ValidationConfig


PAGE_HTML = b"""
<html>
<head><title>Links</title></head>
<body>
  <a href="/ok">ok</a>
  <a href="/gone">gone</a>
  <a href="/moved">moved</a>
  <a href="http://slow.test/">slow</a>
  <a href="http://nowhere.test/">nowhere</a>
  <a href="mailto:team@site.test">mail</a>
  <a href="#top">top</a>
  <a>no href</a>
</body>
</html>
"""


@pytest.fixture
def app(session):
    config = ValidationConfig(job_timeout=10, max_concurrent_probes=3, max_deliveries=2)
    service, queue, job_service = create_link_validation_app(config=config, session=session, workers=1)
    yield service, queue, job_service
    queue.stop()


@pytest.fixture
def network():
    with requests_mock.Mocker() as m:
        m.get("http://site.test/ok", status_code=200)
        m.get("http://site.test/gone", status_code=404)
        m.get("http://site.test/moved", status_code=301, headers={'Location': 'http://site.test/ok'})
        m.get("http://slow.test/", exc=requests.exceptions.ReadTimeout)
        m.get("http://nowhere.test/", exc=requests.exceptions.ConnectionError(
            "Failed to resolve 'nowhere.test' ([Errno -2] Name or service not known)"))
        yield m


class TestEndToEndValidation:

    def test_page_links_are_validated_and_stored(self, app, network):
        service, queue, _ = app
        network.get("http://site.test/", content=PAGE_HTML, headers={'Content-Type': 'text/html'})

        page_id = service.submit_page("http://site.test")
        queue.start()

        assert queue.join(timeout=10)
        assert queue.dead_letters() == []

        outcomes = {r.url: r.outcome for r in service.get_results(page_id)}
        assert outcomes == {
            "http://site.test/ok": ProbeOutcome.http(200),
            "http://site.test/gone": ProbeOutcome.http(404),
            "http://site.test/moved": ProbeOutcome.http(200),
            "http://slow.test/": ProbeOutcome.network_error(NetworkErrorKind.TIMEOUT),
            "http://nowhere.test/": ProbeOutcome.network_error(NetworkErrorKind.DNS_FAILURE),
        }
        broken = sorted(r.url for r in service.get_broken_links(page_id))
        assert broken == ["http://nowhere.test/", "http://site.test/gone", "http://slow.test/"]

    def test_transient_page_failure_is_redelivered(self, app, network):
        service, queue, _ = app
        network.get("http://site.test/", [
            {'status_code': 503},
            {'content': b'<a href="/ok">ok</a>', 'status_code': 200},
        ])

        page_id = service.submit_page("http://site.test")
        queue.start()

        assert queue.join(timeout=10)
        assert queue.dead_letters() == []
        assert [r.url for r in service.get_results(page_id)] == ["http://site.test/ok"]

    def test_persistent_page_failure_is_dead_lettered(self, app, network):
        service, queue, _ = app
        network.get("http://site.test/", exc=requests.exceptions.ConnectTimeout)

        page_id = service.submit_page("http://site.test")
        queue.start()

        assert queue.join(timeout=10)
        assert queue.dead_letters() == [page_id]
        assert service.get_results(page_id, latest_run_only=False) == []

    def test_unknown_page_is_dead_lettered_without_retry(self, app, network):
        _, queue, _ = app

        queue.enqueue("no-such-page")
        queue.start()

        assert queue.join(timeout=10)
        assert queue.dead_letters() == ["no-such-page"]

    def test_rerun_keeps_latest_batch_separate(self, app, network):
        service, queue, job_service = app
        network.get("http://site.test/", content=b'<a href="/ok">ok</a><a href="/gone">gone</a>')

        page_id = service.submit_page("http://site.test")
        first = job_service.run(page_id)
        second = job_service.run(page_id)

        assert first.run_id != second.run_id
        assert len(service.get_results(page_id, latest_run_only=False)) == 4
        assert {r.run_id for r in service.get_results(page_id)} == {second.run_id}

    def test_rerun_without_links_clears_latest_results(self, app, network):
        service, _, job_service = app
        network.get("http://site.test/", [
            {'content': b'<a href="/gone">gone</a>', 'status_code': 200},
            {'content': b'<p>all links removed</p>', 'status_code': 200},
        ])

        page_id = service.submit_page("http://site.test")
        job_service.run(page_id)
        assert [r.url for r in service.get_broken_links(page_id)] == ["http://site.test/gone"]

        job_service.run(page_id)

        assert service.get_results(page_id) == []
        assert service.get_broken_links(page_id) == []
        assert len(service.get_results(page_id, latest_run_only=False)) == 1
