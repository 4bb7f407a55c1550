"""
提取器基类模块

流水线只依赖 BaseExtractor 的三个操作，不关心底层匹配方式：
- extract_detail_links(): 从索引页提取详情页链接
- extract_download_links(): 从详情页提取下载链接
- extract_category(): 从详情页提取分类
"""
import html as html_lib
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional
from urllib.parse import urljoin


class BaseExtractor(ABC):
    """
    提取器基类

    子类需要实现三个提取方法；基类提供链接去重、相对路径处理、文本清理。
    """

    def __init__(self, base_url: str = ""):
        """
        初始化提取器

        Args:
            base_url: 基础URL（用于处理相对路径），可选
        """
        self.base_url = base_url

    @abstractmethod
    def extract_detail_links(self, html: str, limit: Optional[int] = None) -> List[str]:
        """
        从索引页提取详情页链接

        Args:
            html: 索引页HTML
            limit: 最多返回的数量

        Returns:
            详情页URL列表（按页面顺序，已去重）
        """

    @abstractmethod
    def extract_download_links(self, html: str) -> List[str]:
        """从详情页提取下载链接（按页面顺序，已去重）"""

    @abstractmethod
    def extract_category(self, html: str) -> Optional[str]:
        """从详情页提取分类，未匹配返回 None"""

    def _normalize_links(self, links: Iterable[str], limit: Optional[int] = None) -> List[str]:
        """去重、反转义、补全相对路径，并按 limit 截断"""
        result = []
        for link in links:
            link = html_lib.unescape(link.strip())
            if not link:
                continue
            if self.base_url and not link.startswith('http'):
                link = urljoin(self.base_url, link)
            if link not in result:
                result.append(link)
            if limit is not None and len(result) >= limit:
                break
        return result

    def _clean_text(self, text: Optional[str]) -> Optional[str]:
        """HTML 反转义并去掉首尾空白，空字符串返回 None"""
        if text is None:
            return None
        text = html_lib.unescape(text).strip()
        return text or None
