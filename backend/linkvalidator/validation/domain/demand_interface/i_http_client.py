from abc import ABC, abstractmethod

from ..value_objects.http_response import HttpResponse


class IHttpClient(ABC):
    """网络边界：带超时与重定向上限的 HTTP 抓取原语"""

    @abstractmethod
    def get(self, url: str) -> HttpResponse:
        """
        执行HTTP GET请求并读取响应体
        返回: HttpResponse(最终状态码, 响应体)；网络失败时 error_kind 有值
        不抛出网络异常
        """
        pass

    @abstractmethod
    def get_status(self, url: str) -> HttpResponse:
        """
        执行HTTP GET请求但不下载响应体
        用途: 链接探测只关心最终状态码
        """
        pass
