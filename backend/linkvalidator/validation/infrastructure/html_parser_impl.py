from typing import Iterator, Optional, Tuple

from bs4 import BeautifulSoup

from linkvalidator.shared.logging_config import get_error_logger
from ..domain.demand_interface.i_html_parser import IHtmlParser


# 锚点类元素：都通过 href 指向其他资源
ANCHOR_TAGS: Tuple[str, ...] = ('a', 'area')


class HrefSequence:
    """
    惰性、有限、可重复迭代的 href 序列
    每次迭代都会重新解析文档，迭代之间不共享游标。
    """

    def __init__(self, parser: 'HtmlParserImpl', html: bytes, encoding: Optional[str]):
        self._parser = parser
        self._html = html
        self._encoding = encoding

    def __iter__(self) -> Iterator[str]:
        return self._parser.iter_hrefs(self._html, self._encoding)


class HtmlParserImpl(IHtmlParser):
    """基于BeautifulSoup的HTML解析器实现"""

    def __init__(self, parser: str = 'html.parser', tags: Tuple[str, ...] = ANCHOR_TAGS):
        """
        初始化HTML解析器

        参数:
            parser: 解析器类型，可选值:
                   'html.parser' (Python内置，默认)
                   'lxml' (更快，需安装lxml)
                   'html5lib' (最宽容，需安装html5lib)
            tags: 视为锚点的标签名
        """
        self._parser = parser
        self._tags = tags
        self._error_logger = get_error_logger()

    def extract_hrefs(self, html: bytes, encoding: Optional[str] = None) -> HrefSequence:
        """
        按文档顺序提取原始 href（不做规范化、不去重）

        参数:
            html: HTML 原始字节（也接受 str）
            encoding: 响应声明的编码，None 时由 BeautifulSoup 自行探测

        返回:
            HrefSequence，可多次迭代
        """
        return HrefSequence(self, html, encoding)

    def iter_hrefs(self, html, encoding: Optional[str] = None) -> Iterator[str]:
        if not html:
            return

        try:
            if isinstance(html, bytes):
                soup = BeautifulSoup(html, self._parser, from_encoding=encoding)
            else:
                soup = BeautifulSoup(html, self._parser)
            anchors = soup.find_all(self._tags, href=True)
        except Exception as e:
            # 解析失败时不抛出异常，视为没有可提取的链接
            self._error_logger.error(
                f"HTML链接提取失败: {type(e).__name__} - {e}",
                extra={'component': 'html_parser'}
            )
            return

        for tag in anchors:
            yield tag['href']
