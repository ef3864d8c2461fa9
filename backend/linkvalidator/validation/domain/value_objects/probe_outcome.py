from dataclasses import dataclass
from enum import Enum
from typing import Optional


class NetworkErrorKind(Enum):
    """网络失败的分类（探测结果的一种）"""
    TIMEOUT = "TIMEOUT"
    CONNECTION_REFUSED = "CONNECTION_REFUSED"
    DNS_FAILURE = "DNS_FAILURE"
    TLS_FAILURE = "TLS_FAILURE"
    TOO_MANY_REDIRECTS = "TOO_MANY_REDIRECTS"
    CONNECTION_FAILED = "CONNECTION_FAILED"  # 其他无法归类的连接失败
    INVALID_URL = "INVALID_URL"              # HTTP栈拒绝处理的URL
    INVALID_RESPONSE = "INVALID_RESPONSE"    # 状态码不在 100-599 范围内


@dataclass(frozen=True)
class ProbeOutcome:
    """
    探测结果值对象（带标签的值）
    - Http(code): status_code 有值，error_kind 为 None
    - NetworkError(kind): error_kind 有值，status_code 为 None
    二者必居其一，不能同时存在或同时缺失。
    """
    status_code: Optional[int] = None
    error_kind: Optional[NetworkErrorKind] = None

    def __post_init__(self):
        if (self.status_code is None) == (self.error_kind is None):
            raise ValueError("ProbeOutcome 必须且只能包含状态码或网络错误之一")
        if self.status_code is not None and not 100 <= self.status_code <= 599:
            raise ValueError(f"非法HTTP状态码: {self.status_code}")

    @classmethod
    def http(cls, code: int) -> "ProbeOutcome":
        return cls(status_code=code)

    @classmethod
    def network_error(cls, kind: NetworkErrorKind) -> "ProbeOutcome":
        return cls(error_kind=kind)

    @property
    def is_network_error(self) -> bool:
        return self.error_kind is not None

    @property
    def is_ok(self) -> bool:
        """最终响应为 2xx/3xx 视为链接可用"""
        return self.status_code is not None and 200 <= self.status_code < 400

    @property
    def label(self) -> str:
        """用于日志与展示：'404' 或 'TIMEOUT'"""
        if self.status_code is not None:
            return str(self.status_code)
        return self.error_kind.value
