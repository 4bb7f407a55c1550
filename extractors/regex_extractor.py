"""
正则提取器
"""
import re
from typing import List, Optional

from config import SiteConfig
from extractors.base import BaseExtractor


class RegexExtractor(BaseExtractor):
    """基于正则表达式的提取器，每个正则的第一个分组为提取结果"""

    def __init__(
        self,
        detail_link_pattern: str,
        download_link_pattern: str,
        category_pattern: str,
        base_url: str = ""
    ):
        super().__init__(base_url)
        self.detail_link_re = re.compile(detail_link_pattern)
        self.download_link_re = re.compile(download_link_pattern)
        self.category_re = re.compile(category_pattern)

    @classmethod
    def from_config(cls, site: SiteConfig) -> "RegexExtractor":
        return cls(
            detail_link_pattern=site.detail_link_pattern,
            download_link_pattern=site.download_link_pattern,
            category_pattern=site.category_pattern,
            base_url=site.index_base_url,
        )

    def extract_detail_links(self, html: str, limit: Optional[int] = None) -> List[str]:
        return self._normalize_links((m.group(1) for m in self.detail_link_re.finditer(html)), limit)

    def extract_download_links(self, html: str) -> List[str]:
        return self._normalize_links(m.group(1) for m in self.download_link_re.finditer(html))

    def extract_category(self, html: str) -> Optional[str]:
        match = self.category_re.search(html)
        if not match:
            return None
        return self._clean_text(match.group(1))
