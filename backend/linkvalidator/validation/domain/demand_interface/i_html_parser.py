from abc import ABC, abstractmethod
from typing import Iterable, Optional


class IHtmlParser(ABC):
    """只负责HTML结构解析，不包含业务判断"""

    @abstractmethod
    def extract_hrefs(self, html: bytes, encoding: Optional[str] = None) -> Iterable[str]:
        """
        按文档顺序返回每个锚点类元素的原始 href
        - 惰性、有限、可重复迭代
        - 没有 href 属性的元素被跳过
        - 容错解析，不抛出异常
        """
        pass
