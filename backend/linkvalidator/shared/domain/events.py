"""
领域事件基类
放在 shared 中，是为了让 event_handlers/ 下的处理器只依赖事件的共同字段，
而不依赖任何具体的限界上下文。
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Any, Dict


@dataclass
class DomainEvent:
    """
    所有领域事件的基类
    自动提供时间戳和通用的数据转换接口

    page_id 是作业键（被校验页面的ID），所有事件都按它分组。
    timestamp 使用 kw_only，避免子类无默认值字段跟在默认值字段之后的问题。
    """
    page_id: str
    timestamp: datetime = field(default_factory=datetime.now, kw_only=True)

    @property
    def event_type(self) -> str:
        """默认使用类名作为事件类型"""
        return self.__class__.__name__

    @property
    def data(self) -> Dict[str, Any]:
        """将事件字段转换为字典，排除基类字段"""
        all_data = asdict(self)
        return {
            k: v for k, v in all_data.items()
            if k not in ('page_id', 'timestamp')
        }
