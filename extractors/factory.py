"""
提取器工厂模块

提供统一的提取器创建接口
"""
from typing import Dict, Type
from loguru import logger

from config import SiteConfig
from extractors.base import BaseExtractor
from extractors.regex_extractor import RegexExtractor
from extractors.soup_extractor import SoupExtractor


class ExtractorFactory:
    """
    提取器工厂类

    注册表:
    - regex: RegexExtractor
    - soup: SoupExtractor

    新的提取器需实现 from_config(site) 类方法。
    """

    _registry: Dict[str, Type[BaseExtractor]] = {
        'regex': RegexExtractor,
        'soup': SoupExtractor,
    }

    @classmethod
    def register(cls, name: str, extractor_class: Type[BaseExtractor]):
        """
        注册新的提取器类型

        Examples:
            ExtractorFactory.register('json', JsonApiExtractor)
        """
        cls._registry[name] = extractor_class
        logger.info(f"✅ 注册提取器类型: {name} -> {extractor_class.__name__}")

    @classmethod
    def create(cls, site: SiteConfig) -> BaseExtractor:
        """
        按站点配置创建提取器

        Raises:
            ValueError: 未知的提取器类型
        """
        extractor_class = cls._registry.get(site.extractor)
        if extractor_class is None:
            available = ", ".join(sorted(cls._registry))
            raise ValueError(f"未知的提取器类型: {site.extractor}，可用: {available}")
        logger.debug(f"🧩 使用提取器: {extractor_class.__name__}")
        return extractor_class.from_config(site)

    @classmethod
    def available(cls):
        return sorted(cls._registry)
