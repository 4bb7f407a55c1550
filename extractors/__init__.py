"""
提取器模块

包含详情页/下载链接/分类提取器：
- BaseExtractor: 提取器基类
- RegexExtractor: 基于正则的提取器
- SoupExtractor: 基于 BeautifulSoup 的提取器
- ExtractorFactory: 提取器工厂
"""
from extractors.base import BaseExtractor
from extractors.regex_extractor import RegexExtractor
from extractors.soup_extractor import SoupExtractor
from extractors.factory import ExtractorFactory

__all__ = ['BaseExtractor', 'RegexExtractor', 'SoupExtractor', 'ExtractorFactory']
