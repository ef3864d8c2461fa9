from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from .probe_outcome import ProbeOutcome


@dataclass
class LinkResult:
    """
    单个链接的探测结果
    page_id 是对页面的非拥有引用；run_id 区分同一页面的不同批次。
    """
    page_id: str
    run_id: str
    url: str
    outcome: ProbeOutcome
    checked_at: datetime = field(default_factory=datetime.now)
    id: Optional[int] = None
