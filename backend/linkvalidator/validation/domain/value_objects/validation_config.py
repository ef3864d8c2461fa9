import os
from dataclasses import dataclass


@dataclass
class ValidationConfig:
    """
    校验作业配置
    - page_timeout / probe_timeout: 单次网络操作超时（秒）
    - max_redirects: 跟随重定向的上限
    - max_concurrent_probes: 单个作业内并发探测上限（作业私有的线程池大小）
    - job_timeout: 探测阶段总时长上限（秒）
    - write_attempts: 每条结果的写入尝试次数
    - max_deliveries: 队列对可重试失败的最大投递次数
    """
    page_timeout: float = 10.0
    probe_timeout: float = 10.0
    max_redirects: int = 5
    max_concurrent_probes: int = 5
    job_timeout: float = 120.0
    write_attempts: int = 3
    max_deliveries: int = 3
    user_agent: str = "LinkValidator/1.0"

    def __post_init__(self):
        """数据校验"""
        if self.page_timeout <= 0 or self.probe_timeout <= 0 or self.job_timeout <= 0:
            raise ValueError("超时时间必须为正数")
        if not 1 <= self.max_concurrent_probes <= 64:
            raise ValueError(f"max_concurrent_probes 超出范围 [1, 64]: {self.max_concurrent_probes}")
        if not 0 <= self.max_redirects <= 30:
            raise ValueError(f"max_redirects 超出范围 [0, 30]: {self.max_redirects}")
        if self.write_attempts < 1:
            raise ValueError("write_attempts 至少为 1")
        if self.max_deliveries < 1:
            raise ValueError("max_deliveries 至少为 1")

    @classmethod
    def from_env(cls) -> "ValidationConfig":
        """
        从 LINKVALIDATOR_* 环境变量读取配置，缺省时使用默认值
        （.env 由 shared.db_manager 在导入时加载）
        """
        defaults = cls()

        def _get(name, cast, default):
            raw = os.getenv(f"LINKVALIDATOR_{name}")
            return cast(raw) if raw not in (None, "") else default

        return cls(
            page_timeout=_get("PAGE_TIMEOUT", float, defaults.page_timeout),
            probe_timeout=_get("PROBE_TIMEOUT", float, defaults.probe_timeout),
            max_redirects=_get("MAX_REDIRECTS", int, defaults.max_redirects),
            max_concurrent_probes=_get("MAX_CONCURRENT_PROBES", int, defaults.max_concurrent_probes),
            job_timeout=_get("JOB_TIMEOUT", float, defaults.job_timeout),
            write_attempts=_get("WRITE_ATTEMPTS", int, defaults.write_attempts),
            max_deliveries=_get("MAX_DELIVERIES", int, defaults.max_deliveries),
            user_agent=_get("USER_AGENT", str, defaults.user_agent),
        )
