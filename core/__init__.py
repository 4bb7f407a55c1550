"""
核心模块

包含流水线组件：
- fetcher: 页面获取器
- downloader: 文件下载器
- barrier: 完成屏障
- worker_pool: 下载 worker 池
- checkpoint: 检查点存储（断点续传）
- ledger: 链接台账
- index_crawler / detail_processor / record_dispatcher: 三个流水线阶段
- pipeline: 流水线组装
"""
from .barrier import Barrier, CountingBarrier, NullBarrier
from .checkpoint import CheckpointStore
from .downloader import FileDownloader
from .exceptions import SpiderError, IndexFetchError, CheckpointError, DirectoryError, FetchError
from .fetcher import PageFetcher
from .ledger import Ledger
from .models import ItemRecord, WorkItem
from .pipeline import Pipeline, resolve_start_page
from .worker_pool import WorkerPool

__all__ = [
    'Barrier',
    'CountingBarrier',
    'NullBarrier',
    'CheckpointStore',
    'FileDownloader',
    'SpiderError',
    'IndexFetchError',
    'CheckpointError',
    'DirectoryError',
    'FetchError',
    'PageFetcher',
    'Ledger',
    'ItemRecord',
    'WorkItem',
    'Pipeline',
    'resolve_start_page',
    'WorkerPool',
]
