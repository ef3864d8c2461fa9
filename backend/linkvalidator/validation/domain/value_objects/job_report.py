from dataclasses import dataclass

from .job_status import JobStatus


@dataclass
class JobReport:
    """一次作业执行（一次投递）的汇总"""
    page_id: str
    run_id: str
    status: JobStatus
    extracted: int = 0
    accepted: int = 0
    rejected: int = 0
    probed: int = 0
    persisted: int = 0
    write_failures: int = 0
    abandoned: int = 0
    elapsed: float = 0.0
