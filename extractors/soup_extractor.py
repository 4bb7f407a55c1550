"""
BeautifulSoup 提取器

按 CSS 选择器提取链接；分类取标签文本为 category_label 的 <dt> 之后的 <dd> 文本。
"""
from typing import List, Optional
from bs4 import BeautifulSoup

from config import SiteConfig
from extractors.base import BaseExtractor


class SoupExtractor(BaseExtractor):
    """基于 CSS 选择器的提取器"""

    def __init__(
        self,
        detail_link_selector: str,
        download_link_selector: str,
        category_label: str = "Category:",
        base_url: str = ""
    ):
        super().__init__(base_url)
        self.detail_link_selector = detail_link_selector
        self.download_link_selector = download_link_selector
        self.category_label = category_label

    @classmethod
    def from_config(cls, site: SiteConfig) -> "SoupExtractor":
        return cls(
            detail_link_selector=site.detail_link_selector,
            download_link_selector=site.download_link_selector,
            category_label=site.category_label,
            base_url=site.index_base_url,
        )

    def _select_hrefs(self, html: str, selector: str) -> List[str]:
        soup = BeautifulSoup(html, "html.parser")
        return [a.get("href", "") for a in soup.select(selector)]

    def extract_detail_links(self, html: str, limit: Optional[int] = None) -> List[str]:
        return self._normalize_links(self._select_hrefs(html, self.detail_link_selector), limit)

    def extract_download_links(self, html: str) -> List[str]:
        return self._normalize_links(self._select_hrefs(html, self.download_link_selector))

    def extract_category(self, html: str) -> Optional[str]:
        soup = BeautifulSoup(html, "html.parser")
        for dt in soup.find_all("dt"):
            if dt.get_text(strip=True) != self.category_label:
                continue
            dd = dt.find_next_sibling("dd")
            if dd is None:
                return None
            # 多个分类时取最后一个链接，与正则提取器一致
            links = dd.find_all("a")
            text = links[-1].get_text() if links else dd.get_text()
            return self._clean_text(text)
        return None
