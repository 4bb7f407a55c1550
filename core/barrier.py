"""
完成屏障

- CountingBarrier: 计数屏障，add 登记待完成数量，done 完成一个，wait 等待计数归零
- NullBarrier: 空屏障（快速模式下的页屏障），所有操作为空操作

两者接口一致，worker 的完成路径不需要区分模式。
"""
import asyncio
from abc import ABC, abstractmethod
from typing import Dict


class Barrier(ABC):
    """屏障接口"""

    @abstractmethod
    def add(self, n: int = 1):
        """登记 n 个待完成单元"""

    @abstractmethod
    def done(self):
        """完成一个单元"""

    @abstractmethod
    async def wait(self):
        """等待所有已登记单元完成"""

    @abstractmethod
    def reset(self):
        """重置计数统计，供下一轮复用"""

    @property
    @abstractmethod
    def pending(self) -> int:
        """未完成的单元数"""


class CountingBarrier(Barrier):
    """
    计数屏障（asyncio）

    统计 total_added / total_done，用于校验登记与完成次数一致。
    """

    def __init__(self, name: str = "barrier"):
        self.name = name
        self._count = 0
        self._zero = asyncio.Event()
        self._zero.set()
        self.total_added = 0
        self.total_done = 0

    def add(self, n: int = 1):
        if n < 0:
            raise ValueError(f"{self.name}: add() 参数不能为负数: {n}")
        if n == 0:
            return
        self._count += n
        self.total_added += n
        self._zero.clear()

    def done(self):
        if self._count <= 0:
            raise RuntimeError(f"{self.name}: done() 调用次数超过 add() 登记数量")
        self._count -= 1
        self.total_done += 1
        if self._count == 0:
            self._zero.set()

    async def wait(self):
        await self._zero.wait()

    def reset(self):
        if self._count != 0:
            raise RuntimeError(f"{self.name}: 仍有 {self._count} 个未完成单元，不能重置")
        self.total_added = 0
        self.total_done = 0

    @property
    def pending(self) -> int:
        return self._count

    def get_stats(self) -> Dict[str, int]:
        return {
            "pending": self._count,
            "added": self.total_added,
            "done": self.total_done,
        }


class NullBarrier(Barrier):
    """空屏障：不计数，wait 立即返回"""

    def add(self, n: int = 1):
        pass

    def done(self):
        pass

    async def wait(self):
        return None

    def reset(self):
        pass

    @property
    def pending(self) -> int:
        return 0
