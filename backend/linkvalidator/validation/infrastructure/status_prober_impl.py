from linkvalidator.shared.logging_config import get_error_logger
from ..domain.demand_interface.i_http_client import IHttpClient
from ..domain.domain_service.i_status_prober import IStatusProber
from ..domain.value_objects.probe_outcome import NetworkErrorKind, ProbeOutcome


class StatusProberImpl(IStatusProber):
    """
    基于 IHttpClient 的链接探测实现
    单次 GET、跟随有限次重定向、报告最终状态码；内部不重试。
    """

    def __init__(self, http_client: IHttpClient):
        self._http = http_client
        self._error_logger = get_error_logger()

    def probe(self, url: str) -> ProbeOutcome:
        response = self._http.get_status(url)

        if response.is_network_error:
            return ProbeOutcome.network_error(response.error_kind)

        if not 100 <= response.status_code <= 599:
            self._error_logger.error(
                f"非法HTTP状态码 {response.status_code}: {url}",
                extra={'url': url, 'component': 'status_prober'}
            )
            return ProbeOutcome.network_error(NetworkErrorKind.INVALID_RESPONSE)

        return ProbeOutcome.http(response.status_code)
