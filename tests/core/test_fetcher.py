"""
PageFetcher 单元测试（mock aiohttp）
"""
import unittest
import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp

from config import Config
from core.exceptions import FetchError
from core.fetcher import PageFetcher


def make_response(status=200, text=""):
    resp = MagicMock()
    resp.status = status
    resp.text = AsyncMock(return_value=text)
    resp.__aenter__ = AsyncMock(return_value=resp)
    resp.__aexit__ = AsyncMock(return_value=None)
    return resp


class TestPageFetcherSession(unittest.TestCase):
    """init / close 测试"""

    @patch("core.fetcher.aiohttp.ClientSession")
    def test_context_manager_creates_and_closes_session(self, mock_session_cls):
        mock_session = MagicMock()
        mock_session.close = AsyncMock(return_value=None)
        mock_session_cls.return_value = mock_session

        async def run():
            async with PageFetcher(Config()) as fetcher:
                self.assertIs(fetcher.session, mock_session)
            return fetcher

        fetcher = asyncio.run(run())
        mock_session_cls.assert_called_once()
        mock_session.close.assert_awaited_once()
        self.assertIsNone(fetcher.session)


class TestPageFetcherFetchPage(unittest.TestCase):
    """fetch_page 测试"""

    def _fetcher(self, session):
        fetcher = PageFetcher(Config())
        fetcher.session = session
        return fetcher

    def test_fetch_page_success(self):
        session = MagicMock()
        session.get.return_value = make_response(200, "<html>ok</html>")
        fetcher = self._fetcher(session)

        html = asyncio.run(fetcher.fetch_page("http://index.test/page/1"))
        self.assertEqual(html, "<html>ok</html>")
        self.assertEqual(fetcher.stats["pages_fetched"], 1)
        headers = session.get.call_args.kwargs["headers"]
        self.assertIn("User-Agent", headers)

    def test_fetch_page_http_error_carries_status_and_body(self):
        session = MagicMock()
        session.get.return_value = make_response(404, "No Posts Found.")
        fetcher = self._fetcher(session)

        with self.assertRaises(FetchError) as ctx:
            asyncio.run(fetcher.fetch_page("http://index.test/page/99"))
        self.assertEqual(ctx.exception.status, 404)
        self.assertEqual(ctx.exception.body, "No Posts Found.")
        self.assertEqual(fetcher.stats["requests_failed"], 1)

    def test_fetch_page_client_error(self):
        session = MagicMock()
        session.get.side_effect = aiohttp.ClientConnectionError("refused")
        fetcher = self._fetcher(session)

        with self.assertRaises(FetchError) as ctx:
            asyncio.run(fetcher.fetch_page("http://index.test/page/1"))
        self.assertIsNone(ctx.exception.status)
        self.assertIn("refused", ctx.exception.reason)

    def test_fetch_page_invalid_host(self):
        """idna 编码失败等无效URL也转换为 FetchError"""
        session = MagicMock()
        session.get.side_effect = UnicodeError("encoding with 'idna' codec failed (label empty or too long)")
        fetcher = self._fetcher(session)

        with self.assertRaises(FetchError) as ctx:
            asyncio.run(fetcher.fetch_page("http://bad..test/x"))
        self.assertIn("invalid url", ctx.exception.reason)
        self.assertEqual(fetcher.stats["requests_failed"], 1)

    def test_fetch_page_timeout(self):
        session = MagicMock()
        session.get.side_effect = asyncio.TimeoutError()
        fetcher = self._fetcher(session)

        with self.assertRaises(FetchError) as ctx:
            asyncio.run(fetcher.fetch_page("http://index.test/page/1"))
        self.assertEqual(ctx.exception.reason, "timeout")


if __name__ == "__main__":
    unittest.main()
