"""
索引页爬取阶段

按页码顺序获取索引页，提取详情页链接并推入有界队列。
- 页面包含结束标志或提取不到链接：正常结束
- 索引页获取失败：致命错误
- 慢速模式：等待本页所有下载完成后写检查点，再进入下一页
"""
import asyncio
from typing import AsyncIterator, List, Tuple
from loguru import logger

from config import Config
from core.barrier import Barrier
from core.checkpoint import CheckpointStore
from core.exceptions import CheckpointError, FetchError, IndexFetchError
from core.fetcher import PageFetcher
from extractors.base import BaseExtractor

# 详情队列的关闭标志
END_OF_QUEUE = None


class IndexCrawler:
    """索引页爬取器（单任务顺序执行）"""

    def __init__(
        self,
        config: Config,
        fetcher: PageFetcher,
        extractor: BaseExtractor,
        detail_queue: asyncio.Queue,
        page_barrier: Barrier,
        checkpoint: CheckpointStore
    ):
        self.config = config
        self.fetcher = fetcher
        self.extractor = extractor
        self.detail_queue = detail_queue
        self.page_barrier = page_barrier
        self.checkpoint = checkpoint

        self.stats = {
            'pages_crawled': 0,
            'detail_pages_found': 0,
            'last_page': None,
        }

    def index_url(self, page: int) -> str:
        return f"{self.config.site.index_base_url.rstrip('/')}/{page}"

    async def iter_pages(self, start_page: int) -> AsyncIterator[Tuple[int, List[str]]]:
        """
        逐页产出 (页码, 详情页URL列表)

        惰性执行：调用方取下一项时才获取下一页。
        遇到结束标志或空页时结束迭代。

        Raises:
            IndexFetchError: 索引页获取失败
        """
        sentinel = self.config.site.no_results_sentinel
        page = start_page
        while True:
            url = self.index_url(page)
            logger.info("----------------------")
            logger.info(f"📄 Currently at {url}")
            logger.info("----------------------")

            try:
                html = await self.fetcher.fetch_page(url)
            except FetchError as e:
                if e.body and sentinel in e.body:
                    html = e.body
                else:
                    raise IndexFetchError(url, e.reason) from e

            if sentinel in html:
                logger.info(f"📌 The website reports that this page ({url}) doesn't contain any books.")
                return

            detail_urls = self.extractor.extract_detail_links(html, limit=self.config.site.book_limit_per_page)
            if not detail_urls:
                logger.warning(f"⚠️  Couldn't find any books on this page: ({url})")
                return

            logger.info(f"✅ 发现 {len(detail_urls)} 个详情页")
            yield page, detail_urls
            page += 1

    async def run(self, start_page: int):
        """
        执行爬取，结束时向详情队列发送关闭标志

        Raises:
            IndexFetchError: 索引页获取失败
            CheckpointError: 检查点写入失败
        """
        fast_mode = self.config.crawler.fast_mode
        async for page, detail_urls in self.iter_pages(start_page):
            # 每个详情页在页屏障上占一个单元，由下游丢弃或分发完成后释放
            self.page_barrier.add(len(detail_urls))
            for detail_url in detail_urls:
                await self.detail_queue.put(detail_url)

            self.stats['pages_crawled'] += 1
            self.stats['detail_pages_found'] += len(detail_urls)
            self.stats['last_page'] = page

            if not fast_mode:
                logger.info(f"⏳ Waiting for page [{page}] to finish downloading all the books...")
                await self.page_barrier.wait()
                self.page_barrier.reset()
                if not self.checkpoint.save(page):
                    raise CheckpointError(f"Error writing to {self.checkpoint.path}")

        await self.detail_queue.put(END_OF_QUEUE)
        logger.success(f"🎉 索引爬取完成: 共 {self.stats['pages_crawled']} 页")
