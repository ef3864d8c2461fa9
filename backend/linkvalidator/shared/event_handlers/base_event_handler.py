from abc import ABC, abstractmethod
from datetime import datetime
from linkvalidator.shared.domain.events import DomainEvent


class BaseEventHandler(ABC):
    """
    事件处理器基类
    提供通用的事件格式化方法
    """

    @abstractmethod
    def handle(self, event: DomainEvent) -> None:
        """
        处理事件（子类必须实现）

        参数:
            event: DomainEvent 实例
        """
        pass

    def _format_event_to_log(self, event: DomainEvent) -> dict:
        """
        将领域事件转换为日志格式（通用方法）

        返回:
            格式化的日志字典
        """
        message, level = self._get_message_and_level(event)

        return {
            "timestamp": self._format_timestamp(event.timestamp),
            "level": level,
            "message": message,
            "event_type": event.event_type,
            "page_id": event.page_id,
            "data": event.data
        }

    def _get_message_and_level(self, event: DomainEvent) -> tuple[str, str]:
        """
        根据事件类型生成消息和日志级别

        返回:
            (message, level) 元组
        """
        event_type = event.event_type
        data = event.data

        # --- 作业生命周期事件 ---
        if event_type == "JobStartedEvent":
            return (f"▶ 作业开始 [run: {data.get('run_id', 'N/A')}]", "INFO")

        elif event_type == "PageFetchedEvent":
            return (
                f"✓ 页面抓取成功: {data.get('url', '')} "
                f"(HTTP {data.get('status_code')}, {data.get('content_length', 0)} 字节)",
                "INFO"
            )

        elif event_type == "LinksExtractedEvent":
            return (
                f"🔗 提取链接 {data.get('extracted', 0)} 个: "
                f"可探测 {data.get('accepted', 0)}, 已丢弃 {data.get('rejected', 0)}",
                "INFO"
            )

        elif event_type == "ProbingTimedOutEvent":
            return (
                f"⏱ 探测阶段超时 ({data.get('job_timeout', 0)}秒): "
                f"已完成 {data.get('completed', 0)}, 放弃 {data.get('abandoned', 0)}",
                "WARNING"
            )

        elif event_type == "JobCompletedEvent":
            return (
                f"✓ 校验完成! 共 {data.get('total_links', 0)} 个链接, "
                f"已写入 {data.get('persisted', 0)}, 失效 {data.get('broken', 0)} "
                f"(耗时: {data.get('elapsed_time', 0):.1f}秒)",
                "SUCCESS"
            )

        elif event_type == "JobFailedEvent":
            retry = " (将重新投递)" if data.get('retryable') else ""
            return (
                f"✗ 作业失败 [{data.get('error_type', 'UNKNOWN')}]: "
                f"{data.get('error_message', '未知错误')}{retry}",
                "ERROR"
            )

        # --- 链接探测事件 ---
        elif event_type == "LinkProbedEvent":
            mark = "✓" if data.get('is_ok') else "✗"
            return (
                f"{mark} {data.get('outcome')} {data.get('url', '')}",
                "INFO" if data.get('is_ok') else "WARNING"
            )

        elif event_type == "HrefRejectedEvent":
            return (f"∅ 丢弃 href: {data.get('href')!r}", "DEBUG")

        elif event_type == "LinkResultWriteFailedEvent":
            return (
                f"✗ 结果写入失败 ({data.get('attempts')}次): {data.get('url', '')}\n"
                f"  错误: {data.get('error_message', '')}",
                "ERROR"
            )

        else:
            return (f"事件: {event_type}", "DEBUG")

    def _format_timestamp(self, timestamp: datetime) -> str:
        """格式化时间戳"""
        if not isinstance(timestamp, datetime):
            return str(timestamp)
        return timestamp.strftime('%Y-%m-%d %H:%M:%S')
