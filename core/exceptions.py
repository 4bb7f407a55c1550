"""
异常定义

致命错误（终止整个爬取）：
- IndexFetchError: 索引页获取失败
- CheckpointError: 检查点文件不可用
- DirectoryError: 下载目录 / 分类目录创建失败

条目级错误（记录日志后丢弃该条目）：
- FetchError: 详情页 / 下载请求失败
"""
from typing import Optional


class SpiderError(Exception):
    """爬虫致命错误基类"""


class IndexFetchError(SpiderError):
    """索引页获取失败"""

    def __init__(self, url: str, reason: str):
        super().__init__(f"索引页获取失败 {url}: {reason}")
        self.url = url
        self.reason = reason


class CheckpointError(SpiderError):
    """检查点文件无法创建或写入"""


class DirectoryError(SpiderError):
    """目录创建失败"""


class FetchError(Exception):
    """单个请求失败（网络错误或非200状态）"""

    def __init__(self, url: str, reason: str, status: Optional[int] = None, body: Optional[str] = None):
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason
        self.status = status
        self.body = body
