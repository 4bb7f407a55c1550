"""
爬取流水线

索引爬取 -> 详情页处理 -> 记录分发 -> 下载 worker 池

各阶段之间只通过有界队列和两个屏障通信：
- 页屏障：慢速模式下为计数屏障，快速模式下为空屏障
- 运行屏障：整次运行的下载计数，结束时等待归零
任一阶段抛出致命错误时取消其余阶段和 worker 并向上抛出。
"""
import asyncio
from pathlib import Path
from typing import Any, Callable, Dict, Optional
from loguru import logger

from config import Config
from core.barrier import Barrier, CountingBarrier, NullBarrier
from core.checkpoint import CheckpointStore
from core.detail_processor import DetailProcessor
from core.downloader import FileDownloader
from core.exceptions import DirectoryError
from core.fetcher import PageFetcher
from core.index_crawler import IndexCrawler
from core.ledger import Ledger
from core.record_dispatcher import RecordDispatcher
from core.worker_pool import WorkerPool
from extractors.base import BaseExtractor


def resolve_start_page(config: Config, checkpoint: CheckpointStore) -> int:
    """
    计算起始页码

    resume 且存在有效检查点时，从检查点的下一页开始；否则使用配置的起始页。
    """
    start_page = config.crawler.start_page
    if config.crawler.resume:
        last_page = checkpoint.load()
        if last_page is not None:
            logger.info(f"🔄 从检查点恢复: 第 {last_page + 1} 页")
            return last_page + 1
        logger.info("ℹ️  没有有效检查点，从配置的起始页开始")
    return start_page


class Pipeline:
    """
    爬取流水线

    Example:
        async with PageFetcher(config) as fetcher:
            downloader = FileDownloader(config, fetcher.session)
            pipeline = Pipeline(config, extractor, fetcher, downloader, checkpoint, ledger)
            pipeline.prepare()
            stats = await pipeline.run(start_page)
    """

    def __init__(
        self,
        config: Config,
        extractor: BaseExtractor,
        fetcher: PageFetcher,
        downloader: FileDownloader,
        checkpoint: CheckpointStore,
        ledger: Ledger,
        mkdir: Optional[Callable[[Path], None]] = None
    ):
        self.config = config
        self.extractor = extractor
        self.fetcher = fetcher
        self.downloader = downloader
        self.checkpoint = checkpoint
        self.ledger = ledger
        self.mkdir = mkdir

        self.run_barrier = CountingBarrier("run")
        self.page_barrier: Barrier = (
            NullBarrier() if config.crawler.fast_mode else CountingBarrier("page")
        )

        self.crawler: Optional[IndexCrawler] = None
        self.detail_processor: Optional[DetailProcessor] = None
        self.dispatcher: Optional[RecordDispatcher] = None
        self.pool: Optional[WorkerPool] = None

    def prepare(self):
        """
        创建下载根目录并确保检查点文件可用

        Raises:
            DirectoryError: 下载根目录创建失败
            CheckpointError: 检查点文件不可用
        """
        base_dir = Path(self.config.storage.download_dir)
        try:
            base_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DirectoryError(f"Error creating base directory {base_dir}: {e}") from e
        self.checkpoint.ensure()

    def _build(self):
        crawler_config = self.config.crawler
        detail_queue = asyncio.Queue(
            maxsize=crawler_config.detail_queue_size or self.config.site.book_limit_per_page
        )
        record_queue = asyncio.Queue(maxsize=crawler_config.record_queue_size)

        self.pool = WorkerPool(
            self.downloader,
            size=crawler_config.effective_worker_count(),
            queue_size=crawler_config.work_queue_size,
            show_progress=crawler_config.show_progress,
        )
        self.crawler = IndexCrawler(
            self.config, self.fetcher, self.extractor, detail_queue, self.page_barrier, self.checkpoint
        )
        self.detail_processor = DetailProcessor(
            self.config, self.fetcher, self.extractor, detail_queue, record_queue, self.page_barrier
        )
        self.dispatcher = RecordDispatcher(
            self.config, record_queue, self.pool, self.ledger,
            self.page_barrier, self.run_barrier, mkdir=self.mkdir
        )

    async def run(self, start_page: int) -> Dict[str, Any]:
        """
        运行流水线直到索引结束且所有下载完成

        Returns:
            统计信息字典

        Raises:
            SpiderError: 致命错误（索引页获取失败、检查点写入失败、目录创建失败）
        """
        mode = "fast" if self.config.crawler.fast_mode else "slow"
        logger.info(f"🚀 开始爬取: 起始页={start_page}, 模式={mode}")

        self._build()
        self.pool.start()
        self.ledger.open()
        try:
            stages = [
                asyncio.create_task(self.crawler.run(start_page), name="index-crawler"),
                asyncio.create_task(self.detail_processor.run(), name="detail-processor"),
                asyncio.create_task(self.dispatcher.run(), name="record-dispatcher"),
            ]
            done, pending = await asyncio.wait(stages, return_when=asyncio.FIRST_EXCEPTION)

            failed = [task for task in done if task.exception() is not None]
            if failed:
                for task in pending:
                    task.cancel()
                await asyncio.gather(*pending, return_exceptions=True)
                await self.pool.abort()
                error = failed[0].exception()
                logger.error(f"❌ {failed[0].get_name()} 致命错误: {error}")
                raise error

            logger.info("⏳ Waiting for all the books to finish downloading.")
            await self.run_barrier.wait()
            await self.pool.shutdown()
        finally:
            self.ledger.close()

        stats = self.get_statistics()
        logger.success(f"✅ All done! {stats}")
        return stats

    def get_statistics(self) -> Dict[str, Any]:
        stats: Dict[str, Any] = {}
        for stage in (self.crawler, self.detail_processor, self.dispatcher):
            if stage is not None:
                stats.update(stage.stats)
        if self.pool is not None:
            pool_stats = self.pool.get_stats()
            stats['downloads_submitted'] = pool_stats['submitted']
            stats['downloads_completed'] = pool_stats['completed']
            stats['downloads_failed'] = pool_stats['failed']
        stats['run_barrier'] = self.run_barrier.get_stats()
        return stats
