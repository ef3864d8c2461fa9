from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class Page:
    """被校验的页面：创建后不可变"""
    id: str
    url: str
    created_at: datetime = field(default_factory=datetime.now)
