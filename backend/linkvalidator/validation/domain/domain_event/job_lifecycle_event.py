from dataclasses import dataclass

from linkvalidator.shared.domain.events import DomainEvent


@dataclass
class JobStartedEvent(DomainEvent):
    run_id: str


@dataclass
class PageFetchedEvent(DomainEvent):
    url: str
    status_code: int
    content_length: int


@dataclass
class LinksExtractedEvent(DomainEvent):
    extracted: int
    accepted: int
    rejected: int


@dataclass
class ProbingTimedOutEvent(DomainEvent):
    """探测阶段超过作业级超时，未开始的探测被放弃"""
    completed: int
    abandoned: int
    job_timeout: float


@dataclass
class JobCompletedEvent(DomainEvent):
    run_id: str
    total_links: int
    persisted: int
    broken: int
    elapsed_time: float


@dataclass
class JobFailedEvent(DomainEvent):
    run_id: str
    error_type: str
    error_message: str
    retryable: bool = False
