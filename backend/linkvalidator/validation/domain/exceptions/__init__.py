# Validation job exceptions module
from .job_exceptions import (
    ValidationJobError,
    InvalidJobKeyError,
    SourceFetchError,
    PersistenceUnavailableError,
    InvalidStateTransitionError,
)

__all__ = [
    'ValidationJobError',
    'InvalidJobKeyError',
    'SourceFetchError',
    'PersistenceUnavailableError',
    'InvalidStateTransitionError',
]
