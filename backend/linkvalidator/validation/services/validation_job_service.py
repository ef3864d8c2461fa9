"""
模块职责（应用层）
- 编排一次完整的链接校验作业：加载 → 抓取 → 提取 → 规范化 → 探测 → 持久化；
- 以作业实体 `ValidationJob` 为中心，协调 HTTP 客户端、HTML 解析器、探测器与仓储；
- 作业只接收 page_id，所有状态都通过存储边界重新读取，不跨线程传递实体对象。

设计要点
- 单个链接的问题（拒绝的 href、探测失败）都作为数据记录，不中断作业；
- 只有页面不存在、页面抓取失败、存储整体不可用会以 ValidationJobError 上报给队列；
- 探测阶段使用作业私有的线程池，并且按需提交：同一时刻最多只有 max_concurrent_probes 个
  探测被提交，作业级超时到达后，尚未提交的探测永远不会开始。
"""

from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Dict, Optional
import time

from linkvalidator.shared.event_bus import EventBus
from linkvalidator.shared.logging_config import get_error_logger, get_performance_logger
from ..domain.demand_interface.i_html_parser import IHtmlParser
from ..domain.demand_interface.i_http_client import IHttpClient
from ..domain.demand_interface.i_page_repository import IPageRepository
from ..domain.domain_service.i_status_prober import IStatusProber
from ..domain.domain_service.url_normalizer import normalize_href
from ..domain.entity.validation_job import ValidationJob
from ..domain.exceptions import (
    InvalidJobKeyError, PersistenceUnavailableError, SourceFetchError, ValidationJobError
)
from ..domain.value_objects.job_report import JobReport
from ..domain.value_objects.job_status import JobStatus
from ..domain.value_objects.link_result import LinkResult
from ..domain.value_objects.page import Page
from ..domain.value_objects.probe_outcome import NetworkErrorKind, ProbeOutcome
from ..domain.value_objects.validation_config import ValidationConfig


class ValidationJobService:
    """
    应用服务 - 链接校验作业编排
    run(page_id) 即队列的处理函数：正常返回表示确认，抛出 ValidationJobError 表示失败。
    """

    def __init__(
        self,
        http_client: IHttpClient,
        html_parser: IHtmlParser,
        prober: IStatusProber,
        repository: IPageRepository,
        config: Optional[ValidationConfig] = None,
        event_bus: Optional[EventBus] = None
    ):
        """
        构造函数注入依赖

        参数:
            http_client: 抓取页面本身的 HTTP 客户端
            html_parser: HTML 解析器（链接提取）
            prober: 链接状态探测器
            repository: 页面与结果仓储
            config: 作业配置
            event_bus: 事件总线 (可选，便于测试)
        """
        self._http = http_client
        self._parser = html_parser
        self._prober = prober
        self._repository = repository
        self._config = config or ValidationConfig()
        self._event_bus = event_bus
        self._error_logger = get_error_logger()
        self._perf_logger = get_performance_logger()

    @property
    def config(self) -> ValidationConfig:
        return self._config

    def run(self, page_id: str) -> JobReport:
        """
        执行一次作业（一次投递）
        同一 page_id 重复执行会产生新的、相互独立的一批结果（新的 run_id）

        参数:
            page_id: 作业键

        返回:
            JobReport

        异常:
            InvalidJobKeyError: 页面不存在（永久失败）
            SourceFetchError: 页面抓取失败（可重试）
            PersistenceUnavailableError: 存储整体不可用
        """
        job = ValidationJob(page_id)

        try:
            page = self._load_page(job)
            job.page_loaded(page.url)

            response = self._http.get(page.url)
            if not response.is_success:
                raise SourceFetchError(page_id, page.url, response.error_message or f"HTTP {response.status_code}")
            job.page_fetched(response.status_code, len(response.content))
            self._publish_domain_events(job)

            self._extract_links(job, response.content, response.encoding)
            self._publish_domain_events(job)

            if job.status == JobStatus.PROBING:
                abandoned = self._probe_links(job)
                job.probing_finished(abandoned, self._config.job_timeout)
                self._publish_domain_events(job)

            self._persist_results(job)
            self._record_run(job)
            job.complete()

        except ValidationJobError as e:
            job.fail(e)
            self._publish_domain_events(job)
            raise

        except Exception as e:
            # 未预期的错误同样记为作业失败，原异常继续上抛交给队列处理
            self._error_logger.error(
                f"校验作业出现未预期异常: {type(e).__name__} - {e}",
                extra={'page_id': page_id, 'run_id': job.run_id},
                exc_info=True
            )
            job.fail(ValidationJobError(page_id, f"未预期错误: {type(e).__name__} - {e}", e))
            self._publish_domain_events(job)
            raise

        self._publish_domain_events(job)
        report = job.to_report()
        self._perf_logger.info("校验作业完成", extra={
            'page_id': page_id,
            'run_id': job.run_id,
            'elapsed': round(report.elapsed, 3),
            'probed': report.probed,
            'persisted': report.persisted,
            'abandoned': report.abandoned
        })
        return report

# ---------------------  各阶段 ---------------------

    def _load_page(self, job: ValidationJob) -> Page:
        try:
            page = self._repository.find_page(job.page_id)
        except Exception as e:
            raise PersistenceUnavailableError(job.page_id, f"读取页面失败: {e}", e) from e

        if page is None:
            raise InvalidJobKeyError(job.page_id)
        return page

    def _extract_links(self, job: ValidationJob, content: bytes, encoding: Optional[str]) -> None:
        """提取 + 规范化；被拒绝的 href 静默丢弃"""
        for href in self._parser.extract_hrefs(content, encoding):
            url = normalize_href(href, job.page_url)
            if url is None:
                job.href_rejected(href)
            else:
                job.href_accepted(url)
        job.links_extracted()

    def _probe_links(self, job: ValidationJob) -> int:
        """
        有界并发探测

        返回:
            被放弃的链接数（作业级超时后未开始或未完成的探测）
        """
        limit = self._config.max_concurrent_probes
        deadline = time.monotonic() + self._config.job_timeout
        urls = iter(job.accepted_urls)
        pending: Dict[Future, str] = {}
        exhausted = False

        executor = ThreadPoolExecutor(max_workers=limit, thread_name_prefix=f"probe-{job.page_id[:8]}")
        try:
            while True:
                # 补足到并发上限；超时后不再提交新的探测
                while not exhausted and len(pending) < limit and time.monotonic() < deadline:
                    url = next(urls, None)
                    if url is None:
                        exhausted = True
                        break
                    pending[executor.submit(self._probe_one, url)] = url

                if not pending:
                    break

                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    break

                done, _ = wait(pending, timeout=remaining, return_when=FIRST_COMPLETED)
                for future in done:
                    url = pending.pop(future)
                    job.link_probed(LinkResult(
                        page_id=job.page_id,
                        run_id=job.run_id,
                        url=url,
                        outcome=future.result()
                    ))
        finally:
            # 正在进行的探测结果被丢弃，不会被持久化
            executor.shutdown(wait=False, cancel_futures=True)

        return len(job.accepted_urls) - len(job.results)

    def _probe_one(self, url: str) -> ProbeOutcome:
        try:
            return self._prober.probe(url)
        except Exception as e:
            # 探测边界不允许让作业崩溃
            self._error_logger.error(
                f"探测器异常: {type(e).__name__} - {e}",
                extra={'url': url, 'component': 'status_prober'}
            )
            return ProbeOutcome.network_error(NetworkErrorKind.CONNECTION_FAILED)

    def _persist_results(self, job: ValidationJob) -> None:
        """
        逐条写入，每条最多尝试 write_attempts 次
        单条失败不影响其余记录；整批全部失败视为存储不可用
        """
        attempts = self._config.write_attempts

        for result in job.results:
            last_error: Optional[Exception] = None
            for _ in range(attempts):
                try:
                    result.id = self._repository.create_link_result(
                        result.page_id, result.run_id, result.url, result.outcome
                    )
                    job.result_persisted()
                    last_error = None
                    break
                except Exception as e:
                    last_error = e

            if last_error is not None:
                self._error_logger.error(
                    f"链接结果写入失败: {result.url} - {last_error}",
                    extra={'page_id': job.page_id, 'run_id': job.run_id, 'attempts': attempts}
                )
                job.result_write_failed(result, attempts, str(last_error))

        if job.results and job.persisted == 0:
            raise PersistenceUnavailableError(
                job.page_id, f"{len(job.results)} 条结果全部写入失败"
            )

    def _record_run(self, job: ValidationJob) -> None:
        """
        写入运行记录（零条结果也写），"最近一次运行"以此为准
        运行记录写不进去时，本批结果不会被当作最新结果，作业按存储不可用失败
        """
        last_error: Optional[Exception] = None
        for _ in range(self._config.write_attempts):
            try:
                self._repository.record_run(job.page_id, job.run_id, job.persisted)
                return
            except Exception as e:
                last_error = e

        raise PersistenceUnavailableError(
            job.page_id, f"运行记录写入失败: {last_error}", last_error
        ) from last_error

    def _publish_domain_events(self, job: ValidationJob):
        """发布作业中积压的领域事件"""
        if not self._event_bus:
            job.clear_events()
            return

        for event in job.get_uncommitted_events():
            self._event_bus.publish(event)

        job.clear_events()
