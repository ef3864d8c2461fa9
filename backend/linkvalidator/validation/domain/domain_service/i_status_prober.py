from abc import ABC, abstractmethod

from ..value_objects.probe_outcome import ProbeOutcome


class IStatusProber(ABC):
    """链接状态探测：无状态，便于用假实现替换"""

    @abstractmethod
    def probe(self, url: str) -> ProbeOutcome:
        """
        对绝对URL执行一次探测
        返回: ProbeOutcome.http(最终状态码) 或 ProbeOutcome.network_error(分类)
        任何网络失败都不会以异常形式抛出
        """
        pass
