"""
组合根（Composition Root）
组装校验作业所需的全部依赖：HTTP客户端、HTML解析器、探测器、仓储、事件总线、作业队列。
"""

from typing import Optional, Tuple

from sqlalchemy.orm import Session

from .shared.event_bus import EventBus
from .shared.event_handlers.logging_handler import LoggingEventHandler
from .validation.domain.value_objects.validation_config import ValidationConfig
from .validation.infrastructure.database.page_repository_impl import PageRepositoryImpl
from .validation.infrastructure.database.sqlalchemy_link_dao_impl import SqlAlchemyLinkDaoImpl
from .validation.infrastructure.html_parser_impl import HtmlParserImpl
from .validation.infrastructure.http_client_impl import HttpClientImpl
from .validation.infrastructure.job_queue_impl import JobQueueImpl
from .validation.infrastructure.status_prober_impl import StatusProberImpl
from .validation.services.link_validation_service import LinkValidationService
from .validation.services.validation_job_service import ValidationJobService


def create_event_bus() -> Tuple[EventBus, LoggingEventHandler]:
    """创建事件总线并订阅业务日志处理器"""
    event_bus = EventBus()
    logging_handler = LoggingEventHandler()
    event_bus.subscribe_to_all(logging_handler.handle)
    return event_bus, logging_handler


def create_validation_service(
    config: Optional[ValidationConfig] = None,
    session: Optional[Session] = None,
    event_bus: Optional[EventBus] = None,
    workers: int = 1
) -> ValidationJobService:
    """
    组装校验作业服务

    参数:
        config: 作业配置，默认从环境变量读取
        session: 可选的 SQLAlchemy 会话（测试用），默认使用全局 scoped session
        event_bus: 可选的事件总线
        workers: 共用探测客户端的作业线程数
    """
    config = config or ValidationConfig.from_env()

    # 页面抓取与链接探测使用各自的超时
    page_client = HttpClientImpl(
        user_agent=config.user_agent,
        timeout=config.page_timeout,
        max_redirects=config.max_redirects
    )
    probe_client = HttpClientImpl(
        user_agent=config.user_agent,
        timeout=config.probe_timeout,
        max_redirects=config.max_redirects,
        # 所有作业线程共用一个探测客户端
        pool_maxsize=config.max_concurrent_probes * workers
    )

    repository = PageRepositoryImpl(SqlAlchemyLinkDaoImpl(session))

    return ValidationJobService(
        http_client=page_client,
        html_parser=HtmlParserImpl(),
        prober=StatusProberImpl(probe_client),
        repository=repository,
        config=config,
        event_bus=event_bus
    )


def create_link_validation_app(
    config: Optional[ValidationConfig] = None,
    session: Optional[Session] = None,
    workers: int = 2
) -> Tuple[LinkValidationService, JobQueueImpl, ValidationJobService]:
    """
    组装完整的进程内应用：提交服务 + 作业队列 + 作业服务
    队列需要调用方自行 start()
    """
    config = config or ValidationConfig.from_env()
    event_bus, _ = create_event_bus()

    job_service = create_validation_service(
        config=config, session=session, event_bus=event_bus, workers=workers
    )
    queue = JobQueueImpl(
        handler=job_service.run,
        workers=workers,
        max_deliveries=config.max_deliveries
    )
    repository = PageRepositoryImpl(SqlAlchemyLinkDaoImpl(session))
    return LinkValidationService(repository, queue), queue, job_service
