"""
url_normalizer 的单元测试与属性测试
"""

import pytest
from hypothesis import given, settings, strategies as st

from linkvalidator.validation.domain.domain_service.url_normalizer import (
    normalize_href,
    is_absolute_http_url,
)

BASE = "http://x.com"


class TestNormalizeHref:
    """测试 href 规范化规则"""

    def test_root_relative_is_concatenated(self):
        """根相对路径直接拼接到页面地址之后"""
        assert normalize_href("/a", BASE) == "http://x.com/a"

    def test_absolute_https_is_accepted_unchanged(self):
        assert normalize_href("https://y.com/z", BASE) == "https://y.com/z"

    def test_absolute_http_is_accepted_unchanged(self):
        assert normalize_href("http://q", BASE) == "http://q"

    @pytest.mark.parametrize("href", [
        "mailto:a@b.com",
        "javascript:void(0)",
        "tel:123456",
        "#top",
        "#",
        "page3",
        "../up",
        "ftp://files.example.com/a",
        "not a url at all",
        "",
        "   ",
    ])
    def test_rejected(self, href):
        """非 http/https 或无法解析的 href 被拒绝"""
        assert normalize_href(href, BASE) is None

    def test_missing_href_is_rejected(self):
        assert normalize_href(None, BASE) is None

    def test_literal_concatenation_keeps_double_slash(self):
        """页面地址以 / 结尾时保留双斜杠（字面拼接）"""
        assert normalize_href("/a", "http://x.com/") == "http://x.com//a"

    def test_scheme_relative_is_concatenated_literally(self):
        """// 开头也属于以 / 开头，按字面拼接"""
        assert normalize_href("//cdn.example.com/lib.js", BASE) == "http://x.com//cdn.example.com/lib.js"

    def test_surrounding_whitespace_is_stripped(self):
        assert normalize_href("  /a \n", BASE) == "http://x.com/a"

    def test_root_relative_with_invalid_base_is_rejected(self):
        assert normalize_href("/a", "") is None
        assert normalize_href("/a", None) is None
        assert normalize_href("/a", "x.com") is None

    def test_non_string_href_is_rejected(self):
        assert normalize_href(42, BASE) is None


class TestNormalizeHrefProperties:
    """属性测试：任意输入都不抛异常，接受的结果一定是绝对URL"""

    @settings(max_examples=200, deadline=None)
    @given(href=st.one_of(st.none(), st.text()), base=st.one_of(st.none(), st.text()))
    def test_never_raises(self, href, base):
        result = normalize_href(href, base)
        assert result is None or isinstance(result, str)

    @settings(max_examples=200, deadline=None)
    @given(href=st.text())
    def test_accepted_urls_are_absolute(self, href):
        result = normalize_href(href, BASE)
        if result is not None:
            assert is_absolute_http_url(result)

    @settings(max_examples=100, deadline=None)
    @given(path=st.text(alphabet="abcXYZ0123/-._?=&%~", max_size=30))
    def test_root_relative_always_prefixed_by_base(self, path):
        result = normalize_href("/" + path, BASE)
        assert result == BASE + "/" + path
