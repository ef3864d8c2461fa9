import uuid
from typing import List, Optional

from ...domain.demand_interface.i_page_repository import IPageRepository
from ...domain.domain_service.url_normalizer import is_absolute_http_url
from ...domain.value_objects.page import Page
from ...domain.value_objects.link_result import LinkResult
from ...domain.value_objects.probe_outcome import NetworkErrorKind, ProbeOutcome
from .i_link_dao import ILinkDao
from .models import PageModel, LinkResultModel, JobRunModel


class PageRepositoryImpl(IPageRepository):
    """
    页面与链接结果仓储实现
    """

    def __init__(self, dao: ILinkDao):
        self._dao = dao

    def create_page(self, url: str) -> str:
        """页面 url 只在创建时设置一次，且必须是 http/https 绝对地址"""
        if not is_absolute_http_url(url):
            raise ValueError(f"页面地址必须是 http/https 绝对URL: {url!r}")

        page_id = str(uuid.uuid4())
        self._dao.create_page(PageModel(id=page_id, url=url))
        return page_id

    def find_page(self, page_id: str) -> Optional[Page]:
        model = self._dao.get_page_by_id(page_id)
        if not model:
            return None
        return Page(id=model.id, url=model.url, created_at=model.created_at)

    def create_link_result(self, page_id: str, run_id: str, url: str, outcome: ProbeOutcome) -> int:
        # 持久化之前必须已完成规范化
        if not is_absolute_http_url(url):
            raise ValueError(f"链接结果的 url 必须是绝对地址: {url!r}")
        return self._dao.add_link_result(self._to_result_model(page_id, run_id, url, outcome))

    def get_link_results(self, page_id: str, run_id: Optional[str] = None) -> List[LinkResult]:
        models = self._dao.get_link_results(page_id, run_id)
        return [self._to_result_entity(m) for m in models]

    def record_run(self, page_id: str, run_id: str, result_count: int) -> None:
        self._dao.add_run(JobRunModel(page_id=page_id, run_id=run_id, result_count=result_count))

    def get_run_ids(self, page_id: str) -> List[str]:
        return self._dao.get_run_ids(page_id)

    # ------------------ 映射方法 ------------------

    def _to_result_model(self, page_id: str, run_id: str, url: str, outcome: ProbeOutcome) -> LinkResultModel:
        return LinkResultModel(
            page_id=page_id,
            run_id=run_id,
            url=url,
            status_code=outcome.status_code,
            error_kind=outcome.error_kind.value if outcome.error_kind else None
        )

    def _to_result_entity(self, model: LinkResultModel) -> LinkResult:
        if model.error_kind:
            outcome = ProbeOutcome.network_error(NetworkErrorKind(model.error_kind))
        else:
            outcome = ProbeOutcome.http(model.status_code)

        return LinkResult(
            id=model.id,
            page_id=model.page_id,
            run_id=model.run_id,
            url=model.url,
            outcome=outcome,
            checked_at=model.checked_at
        )
