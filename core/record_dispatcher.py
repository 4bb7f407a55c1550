"""
记录分发阶段

把 ItemRecord 展开为每个下载链接一个 WorkItem：
- 分类目录按需创建（每个分类只创建一次）
- 每个链接先写入台账，再登记屏障并提交给 worker 池
- 分类目录集合和台账句柄只在本阶段使用
"""
import asyncio
import hashlib
import os
from pathlib import Path
from typing import Callable, Optional, Set
from urllib.parse import unquote, urlparse
from loguru import logger

from config import Config
from core.barrier import Barrier
from core.exceptions import DirectoryError
from core.index_crawler import END_OF_QUEUE
from core.ledger import Ledger
from core.models import ItemRecord, WorkItem
from core.worker_pool import WorkerPool


def extract_filename(url: str) -> str:
    """
    从下载URL提取文件名（解码后路径的最后一段）

    先解码再取最后一段，编码的分隔符（%2F）不会产生子路径。
    路径为空时用URL的MD5生成文件名
    """
    path = unquote(urlparse(url).path).replace("\\", "/")
    name = os.path.basename(path)
    if not name or name in ('.', '..'):
        name = hashlib.md5(url.encode()).hexdigest()[:12]
    return name


def category_dirname(category: str) -> str:
    """分类名 -> 目录名（替换路径分隔符）"""
    name = category.replace('/', '-').replace('\\', '-').strip()
    if name in ('', '.', '..'):
        return '_'
    return name


def _default_mkdir(path: Path):
    path.mkdir(exist_ok=True)


class RecordDispatcher:
    """记录分发器（单任务）"""

    def __init__(
        self,
        config: Config,
        record_queue: asyncio.Queue,
        pool: WorkerPool,
        ledger: Ledger,
        page_barrier: Barrier,
        run_barrier: Barrier,
        mkdir: Optional[Callable[[Path], None]] = None
    ):
        """
        Args:
            mkdir: 创建目录的函数，默认 Path.mkdir(exist_ok=True)
        """
        self.config = config
        self.record_queue = record_queue
        self.pool = pool
        self.ledger = ledger
        self.page_barrier = page_barrier
        self.run_barrier = run_barrier
        self.mkdir = mkdir or _default_mkdir
        self.base_dir = Path(config.storage.download_dir)
        self._created_dirs: Set[str] = set()

        self.stats = {
            'records_dispatched': 0,
            'links_discovered': 0,
            'category_dirs_created': 0,
        }

    def ensure_category_dir(self, category: str) -> Path:
        """
        确保分类目录存在（同一分类只调用一次 mkdir）

        Raises:
            DirectoryError: 目录创建失败
        """
        dirname = category_dirname(category)
        path = self.base_dir / dirname
        if dirname in self._created_dirs:
            return path
        try:
            self.mkdir(path)
        except OSError as e:
            raise DirectoryError(f"Error creating book (sub)directory {path}: {e}") from e
        self._created_dirs.add(dirname)
        self.stats['category_dirs_created'] += 1
        return path

    async def run(self):
        while True:
            record = await self.record_queue.get()
            if record is END_OF_QUEUE:
                break
            await self.dispatch(record)
        logger.debug(f"🔒 记录分发结束: {self.stats}")

    async def dispatch(self, record: ItemRecord):
        """展开并提交一条记录，完成后释放该记录在页屏障上的单元"""
        category_dir = self.ensure_category_dir(record.category)

        for link in record.download_links:
            self.ledger.append(record.source_url, link, record.category)
            item = WorkItem(
                remote_url=link,
                destination_path=category_dir / extract_filename(link),
                page_barrier=self.page_barrier,
                run_barrier=self.run_barrier,
            )
            self.run_barrier.add(1)
            self.page_barrier.add(1)
            await self.pool.submit(item)
            self.stats['links_discovered'] += 1

        self.stats['records_dispatched'] += 1
        self.page_barrier.done()
