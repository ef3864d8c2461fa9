"""
校验作业的作业级异常
只有这几类错误会让作业失败；单个链接的问题以 ProbeOutcome 数据的形式记录，不走异常。
"""

from typing import Optional


class ValidationJobError(Exception):
    """作业级失败基类，retryable 告诉队列是否应重新投递"""

    retryable = False

    def __init__(self, page_id: str, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.page_id = page_id
        self.message = message
        self.cause = cause

    def __str__(self):
        return f"[{self.page_id}] {self.message}"


class InvalidJobKeyError(ValidationJobError):
    """作业键对应的页面不存在（永久失败，不重试）"""

    def __init__(self, page_id: str):
        super().__init__(page_id, f"页面不存在: {page_id}")


class SourceFetchError(ValidationJobError):
    """页面本身抓取失败（瞬时失败，由队列重新投递）"""

    retryable = True

    def __init__(self, page_id: str, url: str, message: str, cause: Optional[BaseException] = None):
        super().__init__(page_id, f"页面抓取失败 {url}: {message}", cause)
        self.url = url


class PersistenceUnavailableError(ValidationJobError):
    """存储整体不可用"""

    def __init__(self, page_id: str, message: str, cause: Optional[BaseException] = None):
        super().__init__(page_id, f"存储不可用: {message}", cause)


class InvalidStateTransitionError(Exception):
    """作业状态机的非法转换"""

    def __init__(self, current, target):
        super().__init__(f"非法状态转换: {current.value} -> {target.value}")
        self.current = current
        self.target = target
