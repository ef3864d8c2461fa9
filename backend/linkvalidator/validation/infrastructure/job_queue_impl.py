# infrastructure/job_queue_impl.py
"""
进程内作业队列
- 只传递作业键（page_id），worker 线程逐个投递给处理函数；
- 至少一次投递：可重试失败会重新入队，直到达到最大投递次数；
- 不做退避休眠，重投递立即排到队尾。
"""

from collections import deque
from dataclasses import dataclass
from threading import Condition, Thread
import time
from typing import Any, Callable, Deque, List, Optional

from linkvalidator.shared.logging_config import get_error_logger
from ..domain.demand_interface.i_job_queue import IJobQueue
from ..domain.exceptions import ValidationJobError


@dataclass
class _Delivery:
    page_id: str
    attempt: int = 1


class JobQueueImpl(IJobQueue):
    """基于 deque + 守护线程的作业队列实现"""

    def __init__(
        self,
        handler: Callable[[str], Any],
        workers: int = 2,
        max_deliveries: int = 3
    ):
        """
        参数:
            handler: 作业处理函数，接收 page_id
            workers: worker 线程数（不同页面的作业可以并发执行）
            max_deliveries: 可重试失败的最大投递次数
        """
        if workers < 1:
            raise ValueError("workers 至少为 1")
        if max_deliveries < 1:
            raise ValueError("max_deliveries 至少为 1")

        self._handler = handler
        self._workers = workers
        self._max_deliveries = max_deliveries

        self._pending: Deque[_Delivery] = deque()
        self._dead_letters: List[str] = []
        self._in_flight = 0
        self._running = False
        self._threads: List[Thread] = []
        self._cond = Condition()
        self._error_logger = get_error_logger()

    def enqueue(self, page_id: str) -> None:
        """提交作业键"""
        self._put(_Delivery(page_id=page_id))

    def _put(self, delivery: _Delivery) -> None:
        with self._cond:
            self._pending.append(delivery)
            self._cond.notify()

    def size(self) -> int:
        with self._cond:
            return len(self._pending)

    def dead_letters(self) -> List[str]:
        with self._cond:
            return list(self._dead_letters)

# -------------------- worker 生命周期 --------------------

    def start(self) -> None:
        """启动 worker 线程"""
        with self._cond:
            if self._running:
                return
            self._running = True

        self._threads = [
            Thread(target=self._worker_loop, name=f"job-worker-{i}", daemon=True)
            for i in range(self._workers)
        ]
        for t in self._threads:
            t.start()

    def stop(self, wait: bool = True) -> None:
        """停止 worker；正在执行的作业会执行完，未投递的作业留在队列中"""
        with self._cond:
            self._running = False
            self._cond.notify_all()

        if wait:
            for t in self._threads:
                t.join()
        self._threads = []

    def join(self, timeout: Optional[float] = None) -> bool:
        """
        等待队列清空且没有正在执行的作业

        返回:
            True 表示已清空，False 表示超时
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        with self._cond:
            while self._pending or self._in_flight:
                remaining = None if deadline is None else deadline - time.monotonic()
                if remaining is not None and remaining <= 0:
                    return False
                self._cond.wait(remaining)
            return True

    def _worker_loop(self) -> None:
        while True:
            with self._cond:
                while self._running and not self._pending:
                    self._cond.wait()
                if not self._running:
                    return
                delivery = self._pending.popleft()
                self._in_flight += 1

            try:
                self._deliver(delivery)
            finally:
                with self._cond:
                    self._in_flight -= 1
                    self._cond.notify_all()

    def _deliver(self, delivery: _Delivery) -> None:
        """执行一次投递并根据结果确认、重投递或放入死信"""
        try:
            self._handler(delivery.page_id)

        except ValidationJobError as e:
            if e.retryable and delivery.attempt < self._max_deliveries:
                self._put(_Delivery(page_id=delivery.page_id, attempt=delivery.attempt + 1))
            else:
                self._dead_letter(delivery, e)

        except Exception as e:
            self._error_logger.error(
                f"作业处理出现未预期异常: {type(e).__name__} - {e}",
                extra={'page_id': delivery.page_id, 'attempt': delivery.attempt},
                exc_info=True
            )
            self._dead_letter(delivery, e)

    def _dead_letter(self, delivery: _Delivery, error: Exception) -> None:
        self._error_logger.error(
            f"作业放弃投递: {delivery.page_id} (第{delivery.attempt}次) - {error}",
            extra={'page_id': delivery.page_id, 'attempt': delivery.attempt}
        )
        with self._cond:
            self._dead_letters.append(delivery.page_id)
