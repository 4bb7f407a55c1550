"""
流水线数据模型
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

from core.barrier import Barrier


@dataclass(frozen=True)
class ItemRecord:
    """详情页提取结果：来源页、分类、下载链接（有序）"""
    source_url: str
    category: str
    download_links: Tuple[str, ...]


@dataclass(frozen=True)
class WorkItem:
    """单个下载任务，由 worker 消费且只消费一次"""
    remote_url: str
    destination_path: Path
    page_barrier: Barrier
    run_barrier: Barrier

    def release(self):
        """通知两个屏障该任务已结束（成功或失败）"""
        self.page_barrier.done()
        self.run_barrier.done()
