from dataclasses import dataclass, field
from typing import Dict, Optional

from .probe_outcome import NetworkErrorKind


@dataclass
class HttpResponse:
    """
    网络边界的返回值
    成功建立交换时 status_code 为最终响应状态码；
    网络失败时 status_code 为 0，error_kind 给出分类。
    """
    url: str
    status_code: int
    content: bytes = b''
    encoding: Optional[str] = None
    headers: Dict[str, str] = field(default_factory=dict)
    error_kind: Optional[NetworkErrorKind] = None
    error_message: Optional[str] = None

    @property
    def is_network_error(self) -> bool:
        return self.error_kind is not None

    @property
    def is_success(self) -> bool:
        return self.error_kind is None and 200 <= self.status_code < 300
