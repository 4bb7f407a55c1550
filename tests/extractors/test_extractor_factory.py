"""
ExtractorFactory 单元测试
"""
import unittest

from config import SiteConfig
from extractors import ExtractorFactory, RegexExtractor, SoupExtractor
from extractors.base import BaseExtractor


class DummyExtractor(BaseExtractor):
    @classmethod
    def from_config(cls, site):
        return cls(site.index_base_url)

    def extract_detail_links(self, html, limit=None):
        return []

    def extract_download_links(self, html):
        return []

    def extract_category(self, html):
        return None


class TestExtractorFactory(unittest.TestCase):
    """ExtractorFactory 测试类"""

    def test_create_regex(self):
        self.assertIsInstance(ExtractorFactory.create(SiteConfig(extractor="regex")), RegexExtractor)

    def test_create_soup(self):
        self.assertIsInstance(ExtractorFactory.create(SiteConfig(extractor="soup")), SoupExtractor)

    def test_unknown_raises(self):
        with self.assertRaises(ValueError):
            ExtractorFactory.create(SiteConfig(extractor="xpath"))

    def test_register(self):
        ExtractorFactory.register("dummy", DummyExtractor)
        try:
            extractor = ExtractorFactory.create(SiteConfig(extractor="dummy"))
            self.assertIsInstance(extractor, DummyExtractor)
            self.assertIn("dummy", ExtractorFactory.available())
        finally:
            ExtractorFactory._registry.pop("dummy", None)


if __name__ == "__main__":
    unittest.main()
