from enum import Enum


class JobStatus(Enum):
    """校验作业状态机的状态"""
    LOADING = "LOADING"
    FETCHING = "FETCHING"
    EXTRACTING = "EXTRACTING"
    PROBING = "PROBING"
    PERSISTING = "PERSISTING"
    DONE = "DONE"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.DONE, JobStatus.FAILED)
