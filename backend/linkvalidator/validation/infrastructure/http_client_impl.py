import requests
from requests.adapters import HTTPAdapter
from urllib3.exceptions import ConnectTimeoutError, NameResolutionError, NewConnectionError, ReadTimeoutError
from urllib3.util.retry import Retry
from typing import Optional

from linkvalidator.shared.logging_config import get_error_logger
from ..domain.demand_interface.i_http_client import IHttpClient
from ..domain.value_objects.http_response import HttpResponse
from ..domain.value_objects.probe_outcome import NetworkErrorKind


_DNS_MARKERS = (
    'name or service not known',
    'nodename nor servname',
    'getaddrinfo failed',
    'name resolution',
    'no address associated',
)
_REFUSED_MARKERS = (
    'connection refused',
    'errno 111',
    'winerror 10061',
)


class HttpClientImpl(IHttpClient):
    """基于requests库的HTTP客户端实现"""

    def __init__(
        self,
        user_agent: str = "LinkValidator/1.0",
        timeout: float = 10,
        max_redirects: int = 5,
        max_retries: int = 0,
        retry_backoff: float = 0.3,
        pool_maxsize: int = 10
    ):
        """
        初始化HTTP客户端

        参数:
            user_agent: User-Agent标识
            timeout: 请求超时时间(秒)，同时作用于连接与读取
            max_redirects: 最多跟随的重定向次数，超出记为 TOO_MANY_REDIRECTS
            max_retries: 连接/读取失败的重试次数（探测不重试，默认0）
            retry_backoff: 重试间隔倍数
            pool_maxsize: 每个主机的连接池大小（应不小于并发探测数）
        """
        self._timeout = timeout
        self._max_redirects = max_redirects
        self._session = requests.Session()
        self._session.max_redirects = max_redirects
        self._error_logger = get_error_logger()

        self._session.headers.update({
            'User-Agent': user_agent,
            'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
            'Accept-Encoding': 'gzip, deflate',
            'Connection': 'keep-alive'
        })

        # 重定向由 requests 自己跟随（受 session.max_redirects 约束），这里只管连接/读取重试
        retry_strategy = Retry(
            total=max_retries,
            connect=max_retries,
            read=max_retries,
            backoff_factor=retry_backoff,
            allowed_methods=["HEAD", "GET", "OPTIONS"],
            raise_on_status=False,
        )

        adapter = HTTPAdapter(max_retries=retry_strategy, pool_maxsize=pool_maxsize)
        self._session.mount("http://", adapter)
        self._session.mount("https://", adapter)

    def get(self, url: str) -> HttpResponse:
        """
        执行HTTP GET请求并读取响应体

        参数:
            url: 目标URL

        返回:
            HttpResponse对象；网络失败时 status_code=0 且 error_kind 有值
        """
        try:
            response = self._session.get(url, timeout=self._timeout, allow_redirects=True)

            # requests 在响应头未声明编码时默认 ISO-8859-1，
            # 这里置空，交给 HTML 解析器根据 <meta charset> 自行探测
            encoding = response.encoding
            if encoding and encoding.upper() == 'ISO-8859-1' and \
                    'charset' not in response.headers.get('Content-Type', '').lower():
                encoding = None

            return HttpResponse(
                url=response.url,
                status_code=response.status_code,
                content=response.content,
                encoding=encoding,
                headers=dict(response.headers),
                error_message=None if response.ok else f"HTTP {response.status_code}"
            )

        except Exception as e:
            return self._create_error_response(url, e)

    def get_status(self, url: str) -> HttpResponse:
        """
        执行GET请求但不读取响应体(stream=True)

        参数:
            url: 目标URL

        返回:
            HttpResponse对象(content为空)
        """
        try:
            response = self._session.get(
                url, timeout=self._timeout, allow_redirects=True, stream=True
            )
            try:
                return HttpResponse(
                    url=response.url,
                    status_code=response.status_code,
                    headers=dict(response.headers),
                    error_message=None if response.ok else f"HTTP {response.status_code}"
                )
            finally:
                response.close()

        except Exception as e:
            return self._create_error_response(url, e)

    def classify_error(self, error: BaseException) -> NetworkErrorKind:
        """
        将 requests 异常映射为网络失败分类

        注意顺序：SSLError 与 ConnectTimeout 都是 ConnectionError 的子类，必须先判断
        """
        if isinstance(error, requests.exceptions.SSLError):
            return NetworkErrorKind.TLS_FAILURE
        if isinstance(error, requests.exceptions.Timeout):
            return NetworkErrorKind.TIMEOUT
        if isinstance(error, requests.exceptions.TooManyRedirects):
            return NetworkErrorKind.TOO_MANY_REDIRECTS
        if isinstance(error, (
            requests.exceptions.InvalidURL,
            requests.exceptions.MissingSchema,
            requests.exceptions.InvalidSchema,
            requests.exceptions.URLRequired,
        )):
            return NetworkErrorKind.INVALID_URL
        if isinstance(error, requests.exceptions.ConnectionError):
            return self._classify_connection_error(error)
        return NetworkErrorKind.CONNECTION_FAILED

    def _classify_connection_error(self, error: requests.exceptions.ConnectionError) -> NetworkErrorKind:
        # requests 把 urllib3 的 MaxRetryError 放在 args[0]，真正原因在其 reason 上
        reason = error.args[0] if error.args else None
        reason = getattr(reason, 'reason', reason)
        if isinstance(reason, NameResolutionError):
            return NetworkErrorKind.DNS_FAILURE
        # 重试次数为0时，urllib3 的读/连接超时会被包成 MaxRetryError，requests 再抛出 ConnectionError
        # NewConnectionError 继承自 ConnectTimeoutError，但表示连接被拒等，不算超时
        if isinstance(reason, ReadTimeoutError) or (
            isinstance(reason, ConnectTimeoutError) and not isinstance(reason, NewConnectionError)
        ):
            return NetworkErrorKind.TIMEOUT

        text = str(error).lower()
        if any(marker in text for marker in _DNS_MARKERS):
            return NetworkErrorKind.DNS_FAILURE
        if isinstance(reason, ConnectionRefusedError) or any(marker in text for marker in _REFUSED_MARKERS):
            return NetworkErrorKind.CONNECTION_REFUSED
        return NetworkErrorKind.CONNECTION_FAILED

    def _create_error_response(self, url: str, error: BaseException) -> HttpResponse:
        """
        创建错误响应对象

        参数:
            url: 请求URL
            error: 捕获到的异常

        返回:
            表示网络失败的HttpResponse对象
        """
        kind = self.classify_error(error)
        if not isinstance(error, requests.exceptions.RequestException):
            # 非 requests 异常属于意料之外的情况，写入错误日志
            self._error_logger.error(
                f"未预期的请求异常: {type(error).__name__} - {error}",
                extra={'url': url, 'component': 'http_client'}
            )

        return HttpResponse(
            url=url,
            status_code=0,
            error_kind=kind,
            error_message=f"{kind.value}: {type(error).__name__} - {error}"
        )

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def max_redirects(self) -> int:
        return self._max_redirects

    def close(self):
        """关闭会话，释放连接"""
        self._session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
