from linkvalidator.bootstrap import create_link_validation_app, create_validation_service
from linkvalidator.validation.domain.value_objects.validation_config import ValidationConfig


def _probe_pool_size(job_service):
    adapter = job_service._prober._http._session.get_adapter("http://")
    return adapter._pool_maxsize


def test_probe_pool_covers_all_workers(session):
    config = ValidationConfig(max_concurrent_probes=4)

    _, queue, job_service = create_link_validation_app(config=config, session=session, workers=3)

    assert _probe_pool_size(job_service) == 12
    assert queue._workers == 3


def test_single_service_pool_matches_probe_limit(session):
    job_service = create_validation_service(config=ValidationConfig(max_concurrent_probes=5), session=session)
    assert _probe_pool_size(job_service) == 5
    assert job_service.config.max_concurrent_probes == 5
