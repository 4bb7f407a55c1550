"""
检查点存储 - 纯文本页码文件

文件内容为最后一个处理完成的索引页页码（十进制）。每次保存整体覆盖。
文件缺失、为空或内容无效时视为没有检查点，从配置的起始页开始。
"""
from pathlib import Path
from typing import Optional, Union
from loguru import logger

from core.exceptions import CheckpointError


class CheckpointStore:
    """
    检查点存储

    Example:
        store = CheckpointStore("lastpagenumber.txt")
        store.ensure()
        page = store.load()
        store.save(5)
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def ensure(self):
        """
        确保检查点文件存在且可写（不存在时创建空文件，已存在时不截断）

        Raises:
            CheckpointError: 无法创建或打开文件
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "a", encoding="utf-8"):
                pass
        except OSError as e:
            raise CheckpointError(f"Error creating / reading from {self.path}: {e}") from e

    def load(self) -> Optional[int]:
        """加载检查点页码，没有有效检查点时返回 None"""
        try:
            content = self.path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning(f"⚠️  读取检查点失败 {self.path}: {e}")
            return None

        if not content:
            return None

        try:
            page = int(content)
        except ValueError:
            logger.warning(f"⚠️  Invalid content in {self.path}: {content!r}")
            return None

        if page < 1:
            logger.warning(f"⚠️  Invalid page number in {self.path}: {page}")
            return None

        logger.info("Checkpoint loaded: page {}", page)
        return page

    def save(self, page: int) -> bool:
        """保存页码（整体覆盖），失败返回 False"""
        try:
            self.path.write_text(str(page), encoding="utf-8")
            logger.debug("Checkpoint saved: page {}", page)
            return True
        except OSError as e:
            logger.error(f"Error writing to {self.path}: {e}")
            return False

    def clear(self) -> bool:
        """
        删除检查点文件，文件不存在时返回 False

        Raises:
            CheckpointError: 删除失败
        """
        if not self.path.exists():
            return False
        try:
            self.path.unlink()
        except OSError as e:
            raise CheckpointError(f"Error removing {self.path}: {e}") from e
        logger.info("Checkpoint cleared: {}", self.path)
        return True

    def exists(self) -> bool:
        """是否存在有效检查点"""
        return self.load() is not None
