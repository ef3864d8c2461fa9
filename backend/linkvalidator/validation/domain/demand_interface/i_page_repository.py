from abc import ABC, abstractmethod
from typing import List, Optional

from ..value_objects.page import Page
from ..value_objects.link_result import LinkResult
from ..value_objects.probe_outcome import ProbeOutcome


class IPageRepository(ABC):
    """
    存储边界
    负责 Page 与 LinkResult 的持久化；作业只通过 page_id 读取页面
    """

    @abstractmethod
    def create_page(self, url: str) -> str:
        """创建页面并返回 page_id（url 必须是非空的 http/https 地址）"""
        pass

    @abstractmethod
    def find_page(self, page_id: str) -> Optional[Page]:
        """根据ID查找页面，不存在时返回 None"""
        pass

    @abstractmethod
    def create_link_result(self, page_id: str, run_id: str, url: str, outcome: ProbeOutcome) -> int:
        """写入单条链接结果，返回结果ID"""
        pass

    @abstractmethod
    def get_link_results(self, page_id: str, run_id: Optional[str] = None) -> List[LinkResult]:
        """获取页面的链接结果，可按批次过滤"""
        pass

    @abstractmethod
    def record_run(self, page_id: str, run_id: str, result_count: int) -> None:
        """记录一次已完成的运行（结果为零条时同样记录）"""
        pass

    @abstractmethod
    def get_run_ids(self, page_id: str) -> List[str]:
        """获取页面已完成运行的批次ID，按完成顺序排列"""
        pass
