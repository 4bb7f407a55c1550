"""
文件下载器模块
"""
import asyncio
import aiohttp
from pathlib import Path
from typing import Optional, Dict, Any
from loguru import logger
from fake_useragent import UserAgent

from config import Config

CHUNK_SIZE = 1 << 16


class FileDownloader:
    """
    文件下载器

    把响应体流式写入目标文件（创建或截断）。不做重命名，
    传输中途失败时目标文件可能只写了一部分。
    """

    def __init__(self, config: Config, session: Optional[aiohttp.ClientSession] = None):
        self.config = config
        self.session = session
        self.ua = UserAgent()
        self.download_stats = {
            "total": 0,
            "success": 0,
            "failed": 0,
        }

    def get_headers(self) -> Dict[str, str]:
        """获取请求头"""
        return {
            "User-Agent": self.ua.random if self.config.crawler.rotate_user_agent else self.ua.chrome,
            "Accept": "application/pdf,application/octet-stream,*/*;q=0.8",
        }

    async def download_file(self, url: str, save_path: Path) -> Dict[str, Any]:
        """
        下载单个文件

        Args:
            url: 文件URL
            save_path: 保存路径

        Returns:
            下载结果字典，失败时 success 为 False 并带 error
        """
        self.download_stats["total"] += 1

        try:
            logger.info(f"⬇️  Downloading {url}")

            async with self.session.get(url, headers=self.get_headers()) as response:
                if response.status != 200:
                    raise Exception(f"HTTP {response.status}")

                file_size = 0
                with open(save_path, "wb") as f:
                    async for chunk in response.content.iter_chunked(CHUNK_SIZE):
                        f.write(chunk)
                        file_size += len(chunk)

            self.download_stats["success"] += 1
            logger.success(f"Downloaded: {save_path.name} ({file_size} bytes)")

            return {
                "success": True,
                "url": url,
                "save_path": str(save_path),
                "file_size": file_size,
            }

        except asyncio.CancelledError:
            raise
        except Exception as e:
            self.download_stats["failed"] += 1
            logger.error(f"Error downloading/saving url: {url} err: {e}")
            return {
                "success": False,
                "url": url,
                "save_path": str(save_path),
                "error": str(e) or type(e).__name__,
            }

    def get_stats(self) -> Dict[str, int]:
        """获取下载统计"""
        return self.download_stats.copy()
