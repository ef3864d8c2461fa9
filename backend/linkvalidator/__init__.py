"""链接校验服务：抓取页面 → 提取链接 → 规范化 → 探测 → 持久化"""

__version__ = "0.1.0"
