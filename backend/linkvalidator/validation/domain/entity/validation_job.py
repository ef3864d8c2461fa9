import datetime
import uuid
from typing import Dict, List, Optional, Set

from linkvalidator.shared.domain.events import DomainEvent
from ..value_objects.job_status import JobStatus
from ..value_objects.job_report import JobReport
from ..value_objects.link_result import LinkResult
from ..exceptions import InvalidStateTransitionError, ValidationJobError
from ..domain_event.job_lifecycle_event import (
    JobStartedEvent, PageFetchedEvent, LinksExtractedEvent,
    ProbingTimedOutEvent, JobCompletedEvent, JobFailedEvent
)
from ..domain_event.link_probe_event import (
    LinkProbedEvent, HrefRejectedEvent, LinkResultWriteFailedEvent
)


# 合法的状态转换；任何非终态都可以进入 FAILED
_TRANSITIONS: Dict[JobStatus, Set[JobStatus]] = {
    JobStatus.LOADING: {JobStatus.FETCHING},
    JobStatus.FETCHING: {JobStatus.EXTRACTING},
    JobStatus.EXTRACTING: {JobStatus.PROBING, JobStatus.PERSISTING},
    JobStatus.PROBING: {JobStatus.PERSISTING},
    JobStatus.PERSISTING: {JobStatus.DONE},
    JobStatus.DONE: set(),
    JobStatus.FAILED: set(),
}


class ValidationJob:
    """
    校验作业实体（一次投递对应一个实例）
    只持有 page_id 与本次运行的 run_id，页面数据由存储边界重新读取。
    """

    def __init__(self, page_id: str, run_id: Optional[str] = None):
        self.page_id = page_id
        self.run_id = run_id or str(uuid.uuid4())
        self.status = JobStatus.LOADING
        self.page_url: Optional[str] = None
        self.started_at = datetime.datetime.now()
        self.finished_at: Optional[datetime.datetime] = None

        self.extracted = 0
        self.accepted_urls: List[str] = []
        self.rejected = 0
        self.results: List[LinkResult] = []
        self.abandoned = 0
        self.persisted = 0
        self.write_failures = 0
        self.error: Optional[ValidationJobError] = None

        self._events: List[DomainEvent] = []
        self._record_event(JobStartedEvent(page_id=self.page_id, run_id=self.run_id))

    def _record_event(self, event: DomainEvent):
        self._events.append(event)

    def get_uncommitted_events(self) -> List[DomainEvent]:
        """获取未发布的领域事件（副本）"""
        return list(self._events)

    def clear_events(self):
        """清空已发布的事件"""
        self._events.clear()

#-------------------   状态转换方法   -------------------

    def _transition(self, target: JobStatus):
        if target not in _TRANSITIONS[self.status]:
            raise InvalidStateTransitionError(self.status, target)
        self.status = target

    def page_loaded(self, url: str):
        """LOADING -> FETCHING"""
        self.page_url = url
        self._transition(JobStatus.FETCHING)

    def page_fetched(self, status_code: int, content_length: int):
        """FETCHING -> EXTRACTING"""
        self._transition(JobStatus.EXTRACTING)
        self._record_event(PageFetchedEvent(
            page_id=self.page_id,
            url=self.page_url,
            status_code=status_code,
            content_length=content_length
        ))

    def href_rejected(self, href: Optional[str]):
        self.extracted += 1
        self.rejected += 1
        self._record_event(HrefRejectedEvent(page_id=self.page_id, href=href))

    def href_accepted(self, url: str):
        self.extracted += 1
        self.accepted_urls.append(url)

    def links_extracted(self):
        """
        EXTRACTING -> PROBING
        没有任何可探测链接时直接进入 PERSISTING（零条记录）
        """
        self._record_event(LinksExtractedEvent(
            page_id=self.page_id,
            extracted=self.extracted,
            accepted=len(self.accepted_urls),
            rejected=self.rejected
        ))
        if self.accepted_urls:
            self._transition(JobStatus.PROBING)
        else:
            self._transition(JobStatus.PERSISTING)

    def link_probed(self, result: LinkResult):
        self.results.append(result)
        self._record_event(LinkProbedEvent(
            page_id=self.page_id,
            url=result.url,
            outcome=result.outcome.label,
            is_ok=result.outcome.is_ok
        ))

    def probing_finished(self, abandoned: int = 0, job_timeout: float = 0.0):
        """PROBING -> PERSISTING；abandoned > 0 表示作业级超时放弃了部分探测"""
        self.abandoned = abandoned
        if abandoned:
            self._record_event(ProbingTimedOutEvent(
                page_id=self.page_id,
                completed=len(self.results),
                abandoned=abandoned,
                job_timeout=job_timeout
            ))
        self._transition(JobStatus.PERSISTING)

    def result_persisted(self):
        self.persisted += 1

    def result_write_failed(self, result: LinkResult, attempts: int, error_message: str):
        self.write_failures += 1
        self._record_event(LinkResultWriteFailedEvent(
            page_id=self.page_id,
            url=result.url,
            attempts=attempts,
            error_message=error_message
        ))

    def complete(self):
        """PERSISTING -> DONE"""
        self._transition(JobStatus.DONE)
        self.finished_at = datetime.datetime.now()
        self._record_event(JobCompletedEvent(
            page_id=self.page_id,
            run_id=self.run_id,
            total_links=len(self.results),
            persisted=self.persisted,
            broken=sum(1 for r in self.results if not r.outcome.is_ok),
            elapsed_time=self.elapsed
        ))

    def fail(self, error: ValidationJobError):
        """任何非终态 -> FAILED"""
        if self.status.is_terminal:
            raise InvalidStateTransitionError(self.status, JobStatus.FAILED)
        self.status = JobStatus.FAILED
        self.error = error
        self.finished_at = datetime.datetime.now()
        self._record_event(JobFailedEvent(
            page_id=self.page_id,
            run_id=self.run_id,
            error_type=type(error).__name__,
            error_message=error.message,
            retryable=error.retryable
        ))

#-------------------   查询   -------------------

    @property
    def elapsed(self) -> float:
        end = self.finished_at or datetime.datetime.now()
        return (end - self.started_at).total_seconds()

    def to_report(self) -> JobReport:
        return JobReport(
            page_id=self.page_id,
            run_id=self.run_id,
            status=self.status,
            extracted=self.extracted,
            accepted=len(self.accepted_urls),
            rejected=self.rejected,
            probed=len(self.results),
            persisted=self.persisted,
            write_failures=self.write_failures,
            abandoned=self.abandoned,
            elapsed=self.elapsed
        )
