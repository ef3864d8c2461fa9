from dataclasses import dataclass
from typing import Optional

from linkvalidator.shared.domain.events import DomainEvent


@dataclass
class LinkProbedEvent(DomainEvent):
    """单个链接探测完成（无论成功与否）"""
    url: str
    outcome: str
    is_ok: bool


@dataclass
class HrefRejectedEvent(DomainEvent):
    """href 未通过规范化，被静默丢弃（用于调试日志）"""
    href: Optional[str]


@dataclass
class LinkResultWriteFailedEvent(DomainEvent):
    """单条结果写入失败（重试耗尽），不会中断整批写入"""
    url: str
    attempts: int
    error_message: str
