"""
链接台账

只追加的 CSV 文件，表头 "Page","Link","Category"，每发现一个下载链接追加一行。
记录的是"发现"而不是"下载完成"。只由记录分发阶段使用。
"""
import csv
from pathlib import Path
from typing import Optional, TextIO, Union
from loguru import logger

LEDGER_HEADER = ("Page", "Link", "Category")


class Ledger:
    """链接台账（追加写入，每行立即 flush）"""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._file: Optional[TextIO] = None
        self._writer = None
        self.count = 0

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def open(self):
        """打开台账文件，新文件或空文件先写表头"""
        if self._file is not None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        is_new = not self.path.exists() or self.path.stat().st_size == 0
        self._file = open(self.path, "a", newline="", encoding="utf-8")
        self._writer = csv.writer(self._file, quoting=csv.QUOTE_ALL)
        if is_new:
            self._writer.writerow(LEDGER_HEADER)
            self._file.flush()
        logger.debug(f"📒 台账已打开: {self.path}")

    def append(self, source_url: str, link: str, category: str):
        """追加一条 (来源页, 链接, 分类) 记录"""
        if self._writer is None:
            raise RuntimeError("Ledger is not open")
        self._writer.writerow((source_url, link, category))
        self._file.flush()
        self.count += 1

    def close(self):
        if self._file is not None:
            self._file.close()
            self._file = None
            self._writer = None
            logger.info(f"📒 台账已关闭: {self.path} (本次新增 {self.count} 条)")
