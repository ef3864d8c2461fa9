from abc import ABC, abstractmethod
from typing import List


class IJobQueue(ABC):
    """
    作业队列接口
    只传递作业键（page_id），不传递对象；至少一次投递。
    """

    @abstractmethod
    def enqueue(self, page_id: str) -> None:
        """提交作业键"""
        pass

    @abstractmethod
    def size(self) -> int:
        """返回待投递的作业数量"""
        pass

    @abstractmethod
    def dead_letters(self) -> List[str]:
        """返回已放弃投递的作业键"""
        pass
