"""
RegexExtractor 单元测试
"""
import unittest

from config import SiteConfig
from extractors.regex_extractor import RegexExtractor

INDEX_HTML = """
<h2 class="entry-title"><a href="http://www.allitebooks.com/learning-sql/" rel="bookmark">Learning SQL</a></h2>
<h2 class="entry-title"><a href="http://www.allitebooks.com/python-cookbook/" rel="bookmark">Python Cookbook</a></h2>
<h2 class="entry-title"><a href="http://www.allitebooks.com/learning-sql/" rel="bookmark">Learning SQL</a></h2>
<h2 class="entry-title"><a href="/relative-book/" rel="bookmark">Relative</a></h2>
"""

DETAIL_HTML = """
<dl>
<dt>Author:</dt><dd><a href="/author/someone/">Someone</a></dd>
<dt>Category:</dt><dd><a href="/databases/" rel="category">Databases &amp; Data</a></dd>
</dl>
<span class="download-links"><a href="http://file.allitebooks.com/20150701/Learning%20SQL.pdf" target="_blank">Download PDF</a></span>
<span class="download-links"><a href="http://file.allitebooks.com/20150701/Learning%20SQL.pdf" target="_blank">Mirror</a></span>
"""


class TestRegexExtractor(unittest.TestCase):
    """默认正则（allitebooks 标记结构）"""

    def setUp(self):
        self.extractor = RegexExtractor.from_config(SiteConfig())

    def test_detail_links_in_order_and_deduplicated(self):
        links = self.extractor.extract_detail_links(INDEX_HTML)
        self.assertEqual(links[:2], [
            "http://www.allitebooks.com/learning-sql/",
            "http://www.allitebooks.com/python-cookbook/",
        ])
        self.assertEqual(len(links), 3)

    def test_relative_detail_link_joined(self):
        links = self.extractor.extract_detail_links(INDEX_HTML)
        self.assertEqual(links[2], "http://www.allitebooks.com/relative-book/")

    def test_detail_links_limit(self):
        self.assertEqual(len(self.extractor.extract_detail_links(INDEX_HTML, limit=1)), 1)

    def test_no_detail_links(self):
        self.assertEqual(self.extractor.extract_detail_links("<p>No Posts Found.</p>"), [])

    def test_download_links(self):
        self.assertEqual(
            self.extractor.extract_download_links(DETAIL_HTML),
            ["http://file.allitebooks.com/20150701/Learning%20SQL.pdf"],
        )

    def test_no_download_links(self):
        self.assertEqual(self.extractor.extract_download_links("<html></html>"), [])

    def test_category_unescaped(self):
        self.assertEqual(self.extractor.extract_category(DETAIL_HTML), "Databases & Data")

    def test_category_missing(self):
        self.assertIsNone(self.extractor.extract_category("<dl><dt>Author:</dt></dl>"))

    def test_custom_patterns(self):
        extractor = RegexExtractor(
            detail_link_pattern=r'<a class="item" href="([^"]+)"',
            download_link_pattern=r'data-file="([^"]+)"',
            category_pattern=r'<span class="cat">([^<]+)</span>',
        )
        html = '<a class="item" href="http://a.test/1">x</a><b data-file="http://a.test/1.zip"></b><span class="cat">Tools</span>'
        self.assertEqual(extractor.extract_detail_links(html), ["http://a.test/1"])
        self.assertEqual(extractor.extract_download_links(html), ["http://a.test/1.zip"])
        self.assertEqual(extractor.extract_category(html), "Tools")


if __name__ == "__main__":
    unittest.main()
