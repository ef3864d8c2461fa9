from typing import List, Optional

from ..domain.demand_interface.i_job_queue import IJobQueue
from ..domain.demand_interface.i_page_repository import IPageRepository
from ..domain.value_objects.link_result import LinkResult


class LinkValidationService:
    """
    应用服务 - 页面提交与结果查询
    提交时先由存储创建页面，再只把 page_id 放入队列。
    """

    def __init__(self, repository: IPageRepository, queue: IJobQueue):
        self._repository = repository
        self._queue = queue

    def submit_page(self, url: str) -> str:
        """
        创建页面并提交校验作业

        参数:
            url: 页面地址（http/https 绝对URL）

        返回:
            page_id
        """
        page_id = self._repository.create_page(url)
        self._queue.enqueue(page_id)
        return page_id

    def get_results(self, page_id: str, latest_run_only: bool = True) -> List[LinkResult]:
        """
        查询页面的链接结果

        参数:
            page_id: 页面ID
            latest_run_only: 只返回最近一次完成的运行的结果（重复投递会产生多批结果；
                最近一次运行零结果时返回空列表）
        """
        if not latest_run_only:
            return self._repository.get_link_results(page_id)

        run_id = self._latest_run_id(page_id)
        if run_id is None:
            return []
        return self._repository.get_link_results(page_id, run_id)

    def get_broken_links(self, page_id: str) -> List[LinkResult]:
        """最近一次运行中不可用的链接（非 2xx/3xx 或网络失败）"""
        return [r for r in self.get_results(page_id) if not r.outcome.is_ok]

    def _latest_run_id(self, page_id: str) -> Optional[str]:
        run_ids = self._repository.get_run_ids(page_id)
        return run_ids[-1] if run_ids else None
