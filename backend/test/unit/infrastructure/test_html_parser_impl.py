import pytest
from unittest.mock import patch

from linkvalidator.validation.infrastructure.html_parser_impl import HtmlParserImpl


class TestHtmlParserImpl:
    """
    HtmlParserImpl 的单元测试类

    测试目标：
    - 按文档顺序提取原始 href，不做规范化、不去重；
    - 跳过没有 href 属性的锚点；
    - 序列可重复迭代；
    - 残缺 HTML 与解析异常都不抛出。
    """

    @pytest.fixture
    def parser(self):
        return HtmlParserImpl()

    def test_extracts_hrefs_in_document_order(self, parser):
        html = b'<a href="/p">1</a><a>no href</a><a href="http://q">2</a>'
        assert list(parser.extract_hrefs(html)) == ["/p", "http://q"]

    def test_raw_hrefs_are_not_normalized_or_filtered(self, parser):
        html = b"""
        <a href="mailto:a@b.com">mail</a>
        <a href="#top">top</a>
        <a href="relative/page">rel</a>
        """
        assert list(parser.extract_hrefs(html)) == ["mailto:a@b.com", "#top", "relative/page"]

    def test_duplicates_are_kept(self, parser):
        html = b'<a href="/a">1</a><a href="/a">2</a><a href="/a">3</a>'
        assert list(parser.extract_hrefs(html)) == ["/a", "/a", "/a"]

    def test_area_elements_are_anchors(self, parser):
        html = b'<a href="/first">x</a><map><area href="/area" alt=""></map><a href="/last">y</a>'
        assert list(parser.extract_hrefs(html)) == ["/first", "/area", "/last"]

    def test_non_anchor_href_is_ignored(self, parser):
        html = b'<link href="/style.css" rel="stylesheet"><a href="/page">p</a>'
        assert list(parser.extract_hrefs(html)) == ["/page"]

    def test_sequence_is_restartable(self, parser):
        hrefs = parser.extract_hrefs(b'<a href="/a"></a><a href="/b"></a>')
        assert list(hrefs) == ["/a", "/b"]
        assert list(hrefs) == ["/a", "/b"]

    def test_sequence_is_lazy(self, parser):
        """创建序列时不解析，迭代时才解析"""
        with patch('linkvalidator.validation.infrastructure.html_parser_impl.BeautifulSoup') as mock_bs:
            hrefs = parser.extract_hrefs(b'<a href="/a"></a>')
            mock_bs.assert_not_called()
            list(hrefs)
            mock_bs.assert_called_once()

    def test_malformed_html_is_tolerated(self, parser):
        html = b'<html><body><div><a href="/ok">ok<p><a href="/also-ok">unclosed <b></div><a href='
        hrefs = list(parser.extract_hrefs(html))
        assert hrefs[:2] == ["/ok", "/also-ok"]

    def test_empty_input(self, parser):
        assert list(parser.extract_hrefs(b"")) == []
        assert list(parser.extract_hrefs(None)) == []
        assert list(parser.extract_hrefs(b"<html><body>no links</body></html>")) == []

    def test_accepts_str_input(self, parser):
        assert list(parser.extract_hrefs('<a href="/s">s</a>')) == ["/s"]

    def test_declared_encoding_is_used(self, parser):
        html = '<a href="/café">c</a>'.encode('latin-1')
        assert list(parser.extract_hrefs(html, 'latin-1')) == ["/café"]

    def test_meta_charset_is_sniffed(self, parser):
        html = '<html><head><meta charset="utf-8"></head><body><a href="/日本">j</a></body></html>'.encode('utf-8')
        assert list(parser.extract_hrefs(html)) == ["/日本"]

    def test_parser_exception_yields_nothing(self, parser):
        """模拟 BeautifulSoup 抛出异常，验证安全返回空序列"""
        with patch('linkvalidator.validation.infrastructure.html_parser_impl.BeautifulSoup') as mock_bs:
            mock_bs.side_effect = Exception("Parsing error")
            assert list(parser.extract_hrefs(b"<html></html>")) == []
