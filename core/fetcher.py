"""
页面获取模块

PageFetcher 负责 HTTP Session 管理和页面获取，下载器复用同一个 Session。
"""
import asyncio
import aiohttp
from typing import Dict, Any, Optional
from loguru import logger
from fake_useragent import UserAgent

from config import Config
from core.exceptions import FetchError


class PageFetcher:
    """
    页面获取器

    提供：
    - HTTP Session 管理
    - 请求头（UA 轮换）
    - 页面获取（失败抛出 FetchError，由调用方决定是否致命）
    - 异步上下文管理
    """

    def __init__(self, config: Config):
        self.config = config
        self.session: Optional[aiohttp.ClientSession] = None
        self.ua = UserAgent()

        self.stats = {
            'pages_fetched': 0,
            'requests_failed': 0,
        }

    async def __aenter__(self):
        """异步上下文管理器入口"""
        await self.init()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """异步上下文管理器出口"""
        await self.close()

    async def init(self):
        """初始化HTTP会话"""
        timeout = aiohttp.ClientTimeout(total=self.config.crawler.request_timeout)
        self.session = aiohttp.ClientSession(timeout=timeout)
        logger.info("⚙️  HTTP 会话已初始化")

    async def close(self):
        """关闭会话"""
        if self.session:
            await self.session.close()
            self.session = None
            logger.info(f"📊 请求统计: {self.stats}")

    def get_headers(self) -> Dict[str, str]:
        """获取请求头"""
        return {
            "User-Agent": self.ua.random if self.config.crawler.rotate_user_agent else self.ua.chrome,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.9",
            "Connection": "keep-alive",
        }

    async def fetch_page(self, url: str) -> str:
        """
        获取页面内容

        Args:
            url: 页面URL

        Returns:
            HTML内容

        Raises:
            FetchError: 网络错误、超时、无效URL或非200状态（非200时附带 status 和 body）
        """
        logger.debug(f"📄 获取页面: {url}")
        try:
            async with self.session.get(url, headers=self.get_headers()) as response:
                html = await response.text(errors="replace")
                if response.status != 200:
                    self.stats['requests_failed'] += 1
                    raise FetchError(url, f"HTTP {response.status}", status=response.status, body=html)
                self.stats['pages_fetched'] += 1
                return html
        except FetchError:
            raise
        except asyncio.TimeoutError:
            self.stats['requests_failed'] += 1
            raise FetchError(url, "timeout")
        except aiohttp.ClientError as e:
            self.stats['requests_failed'] += 1
            raise FetchError(url, str(e) or type(e).__name__)
        except ValueError as e:
            # 无效URL（yarl / idna 编码失败）
            self.stats['requests_failed'] += 1
            raise FetchError(url, f"invalid url: {e}")

    def get_stats(self) -> Dict[str, Any]:
        return self.stats.copy()
