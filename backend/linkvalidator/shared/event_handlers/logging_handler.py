# shared/event_handlers/logging_handler.py
from typing import Dict, List, Optional
from collections import deque
import logging

from .base_event_handler import BaseEventHandler
from linkvalidator.shared.domain.events import DomainEvent
from linkvalidator.shared.logging_config import get_job_lifecycle_logger, get_link_probe_logger


# 链接级别的事件写入 domain.link_probe，其余写入 domain.job_lifecycle
_LINK_EVENTS = {"LinkProbedEvent", "HrefRejectedEvent", "LinkResultWriteFailedEvent"}

# SUCCESS 不是标准级别，写文件时按 INFO 处理
_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "SUCCESS": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


class LoggingEventHandler(BaseEventHandler):
    """
    日志事件处理器
    职责：
    1. 捕获领域事件并转换为日志格式
    2. 按页面ID分组存储日志到内存队列
    3. 提供日志查询接口
    """

    def __init__(self, max_logs_per_page: int = 1000):
        """
        参数:
            max_logs_per_page: 每个页面最多保留的日志条数（超出则丢弃最旧的）
        """
        self._page_logs: Dict[str, deque] = {}
        self._max_logs_per_page = max_logs_per_page
        self._lifecycle_logger = get_job_lifecycle_logger()
        self._probe_logger = get_link_probe_logger()
        self._logger = logging.getLogger(__name__)

    def handle(self, event: DomainEvent) -> None:
        """
        处理事件：转换为日志格式并存储

        参数:
            event: DomainEvent 实例
        """
        try:
            page_id = getattr(event, 'page_id', 'unknown_page')

            if page_id not in self._page_logs:
                self._page_logs[page_id] = deque(maxlen=self._max_logs_per_page)

            log_entry = self._format_event_to_log(event)
            self._page_logs[page_id].append(log_entry)

            logger = self._probe_logger if log_entry['event_type'] in _LINK_EVENTS else self._lifecycle_logger
            logger.log(
                _LEVELS.get(log_entry['level'], logging.INFO),
                log_entry['message'],
                extra={
                    'page_id': page_id,
                    'event_type': log_entry['event_type'],
                    'data': log_entry['data']
                }
            )

        except Exception as e:
            # 日志处理本身出错不能影响作业
            self._logger.error(f"LoggingEventHandler error: {e}")

# -------------------- 日志查询接口 --------------------

    def get_logs(self, page_id: str, last_n: Optional[int] = None) -> List[dict]:
        """
        获取页面日志

        参数:
            page_id: 页面ID
            last_n: 获取最近N条，None表示全部
        """
        logs = self._page_logs.get(page_id, deque())

        if last_n:
            return list(logs)[-last_n:]
        return list(logs)

    def get_all_page_ids(self) -> List[str]:
        """获取所有有日志的页面ID列表"""
        return list(self._page_logs.keys())

    def get_logs_by_level(self, page_id: str, level: str) -> List[dict]:
        logs = self._page_logs.get(page_id, deque())
        return [log for log in logs if log['level'] == level]

    def get_error_logs(self, page_id: str) -> List[dict]:
        """快捷方法：获取所有错误日志"""
        return self.get_logs_by_level(page_id, 'ERROR')

    def clear_logs(self, page_id: str) -> None:
        if page_id in self._page_logs:
            self._page_logs[page_id].clear()

    def has_errors(self, page_id: str) -> bool:
        """检查页面是否有错误日志"""
        return len(self.get_error_logs(page_id)) > 0
