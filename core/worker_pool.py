"""
下载 worker 池

固定数量的 worker，每个 worker 同一时间只执行一个 WorkItem：
- intake: 有界任务队列（容量足够容纳一整页的下载任务）
- available: 空闲 worker 队列，worker 完成任务后把自己放回去（租借/归还）
- 分发循环: 取出下一个任务，再租借下一个空闲 worker，把任务交给它
"""
import asyncio
from typing import Any, Dict, List, Optional
from loguru import logger
from tqdm import tqdm

from core.downloader import FileDownloader
from core.models import WorkItem


class Worker:
    """单个下载 worker，拥有一个单槽收件箱"""

    def __init__(self, worker_id: int, pool: "WorkerPool"):
        self.worker_id = worker_id
        self.pool = pool
        self.inbox: asyncio.Queue = asyncio.Queue(maxsize=1)

    async def start(self):
        logger.debug(f"🔧 Worker {self.worker_id} 启动")
        while True:
            item = await self.inbox.get()
            if item is None:
                break

            try:
                result = await self.pool.downloader.download_file(item.remote_url, item.destination_path)
                if result.get("success"):
                    self.pool.stats["completed"] += 1
                else:
                    self.pool.stats["failed"] += 1
            except Exception as e:
                self.pool.stats["failed"] += 1
                logger.error(f"❌ Worker {self.worker_id} 任务失败: {item.remote_url} - {e}")
            finally:
                item.release()
                self.pool.progress.update(1)
                self.pool.available.put_nowait(self)

        logger.debug(f"🔒 Worker {self.worker_id} 退出")


class WorkerPool:
    """
    下载 worker 池

    Example:
        pool = WorkerPool(downloader, size=10)
        pool.start()
        await pool.submit(item)
        ...
        await pool.shutdown()
    """

    def __init__(
        self,
        downloader: FileDownloader,
        size: int = 10,
        queue_size: int = 100,
        show_progress: bool = False
    ):
        """
        初始化 worker 池

        Args:
            downloader: 下载执行器
            size: worker 数量
            queue_size: 任务队列容量
            show_progress: 是否显示 tqdm 进度条
        """
        if size < 1:
            raise ValueError(f"worker 数量必须 >= 1: {size}")
        self.downloader = downloader
        self.size = size
        self.intake: asyncio.Queue = asyncio.Queue(maxsize=queue_size)
        self.available: asyncio.Queue = asyncio.Queue(maxsize=size)
        self.workers: List[Worker] = []
        self._worker_tasks: List[asyncio.Task] = []
        self._dispatch_task: Optional[asyncio.Task] = None
        self.progress = tqdm(total=0, unit="file", desc="下载", disable=not show_progress)

        self.stats = {
            "submitted": 0,
            "completed": 0,
            "failed": 0,
        }

        logger.info(f"🚀 初始化下载池: workers={size}, queue_size={queue_size}")

    def start(self):
        """启动所有 worker 和分发循环"""
        for i in range(self.size):
            worker = Worker(i, self)
            self.workers.append(worker)
            self.available.put_nowait(worker)
            self._worker_tasks.append(asyncio.create_task(worker.start()))
        self._dispatch_task = asyncio.create_task(self._dispatch())

    async def _dispatch(self):
        """分发循环：任务到达后等待空闲 worker"""
        while True:
            item = await self.intake.get()
            if item is None:
                break
            worker = await self.available.get()
            await worker.inbox.put(item)

    async def submit(self, item: WorkItem):
        """提交任务（任务队列满时阻塞）"""
        self.stats["submitted"] += 1
        self.progress.total += 1
        self.progress.refresh()
        await self.intake.put(item)

    async def shutdown(self):
        """等待所有已提交任务执行完毕后关闭 worker"""
        await self.intake.put(None)
        if self._dispatch_task:
            await self._dispatch_task

        # 收回全部 worker 后逐个通知退出
        for _ in range(len(self.workers)):
            worker = await self.available.get()
            await worker.inbox.put(None)

        await asyncio.gather(*self._worker_tasks)
        self.progress.close()
        logger.info(f"📊 下载池统计: {self.stats}")

    async def abort(self):
        """取消分发循环和所有 worker（致命错误时使用）"""
        tasks = list(self._worker_tasks)
        if self._dispatch_task:
            tasks.append(self._dispatch_task)
        for task in tasks:
            if not task.done():
                task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self.progress.close()
        logger.warning(f"⚠️  下载池已中止: {self.stats}")

    def get_stats(self) -> Dict[str, Any]:
        return self.stats.copy()
