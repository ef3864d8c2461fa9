"""
URL 规范化（纯函数）
- 以 "/" 开头的 href 直接拼接到页面地址之后（不去重斜杠，保持字面拼接语义）；
- 拼接结果或原始 href 以 http:// 或 https:// 开头则接受；
- 其余一律拒绝：mailto:/javascript:/tel:、纯锚点、相对路径、乱码、缺失的 href。
"""

from typing import Optional

ACCEPTED_PREFIXES = ('http://', 'https://')


def normalize_href(href: Optional[str], base_url: Optional[str]) -> Optional[str]:
    """
    将原始 href 解析为绝对URL

    参数:
        href: 页面中的原始 href（可能为空、锚点、根相对路径、完整URL或乱码）
        base_url: 页面自身的地址

    返回:
        接受时返回绝对URL字符串，拒绝时返回 None；不会抛出异常
    """
    if not isinstance(href, str):
        return None

    candidate = href.strip()
    if not candidate:
        return None

    if candidate.startswith('/'):
        if not isinstance(base_url, str):
            return None
        # 字面拼接，base_url 以 "/" 结尾时保留双斜杠
        candidate = base_url + candidate

    if candidate.startswith(ACCEPTED_PREFIXES):
        return candidate
    return None


def is_absolute_http_url(url: Optional[str]) -> bool:
    """判断URL是否为 http/https 绝对地址"""
    return isinstance(url, str) and url.startswith(ACCEPTED_PREFIXES)
