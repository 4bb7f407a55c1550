"""
详情页获取与提取阶段

单任务按 FIFO 顺序消费详情页URL，与索引爬取并发执行。
获取失败或没有下载链接的条目直接丢弃（不重试）。
"""
import asyncio
from loguru import logger

from config import Config
from core.barrier import Barrier
from core.exceptions import FetchError
from core.fetcher import PageFetcher
from core.index_crawler import END_OF_QUEUE
from core.models import ItemRecord
from extractors.base import BaseExtractor


class DetailProcessor:
    """详情页处理器"""

    def __init__(
        self,
        config: Config,
        fetcher: PageFetcher,
        extractor: BaseExtractor,
        detail_queue: asyncio.Queue,
        record_queue: asyncio.Queue,
        page_barrier: Barrier
    ):
        self.config = config
        self.fetcher = fetcher
        self.extractor = extractor
        self.detail_queue = detail_queue
        self.record_queue = record_queue
        self.page_barrier = page_barrier

        self.stats = {
            'detail_pages_fetched': 0,
            'detail_pages_failed': 0,
            'items_without_links': 0,
            'records_emitted': 0,
        }

    async def run(self):
        while True:
            detail_url = await self.detail_queue.get()
            if detail_url is END_OF_QUEUE:
                await self.record_queue.put(END_OF_QUEUE)
                break

            record = await self.process(detail_url)
            if record is None:
                self.page_barrier.done()
                continue

            await self.record_queue.put(record)
            self.stats['records_emitted'] += 1

        logger.debug(f"🔒 详情页处理结束: {self.stats}")

    async def process(self, detail_url: str):
        """
        处理单个详情页

        Returns:
            ItemRecord；条目被丢弃时返回 None
        """
        try:
            html = await self.fetcher.fetch_page(detail_url)
        except FetchError as e:
            self.stats['detail_pages_failed'] += 1
            logger.warning(f"⚠️  Error fetching a book page {detail_url} - {e.reason}")
            return None

        self.stats['detail_pages_fetched'] += 1

        try:
            links = self.extractor.extract_download_links(html)
            if not links:
                self.stats['items_without_links'] += 1
                logger.info(f"⏭️  没有下载链接，跳过: {detail_url}")
                return None
            category = self.extractor.extract_category(html) or self.config.site.default_category
        except Exception as e:
            logger.error(f"❌ 提取失败 {detail_url}: {e}")
            return None

        logger.info(f"📚 {detail_url} -> [{category}] {len(links)} 个下载链接")
        return ItemRecord(source_url=detail_url, category=category, download_links=tuple(links))
