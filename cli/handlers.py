"""
CLI命令处理函数

每个处理函数返回进程退出码：0 正常结束，1 致命错误。
"""
from typing import Any, Dict
from loguru import logger

from config import Config, get_site_config, load_config_from_env
from core.checkpoint import CheckpointStore
from core.downloader import FileDownloader
from core.exceptions import SpiderError
from core.fetcher import PageFetcher
from core.ledger import Ledger
from core.pipeline import Pipeline, resolve_start_page
from extractors.factory import ExtractorFactory


def build_config(args) -> Config:
    """
    组装配置：环境变量 / 站点预设 -> 命令行覆盖

    Raises:
        ValueError: 未知的站点配置或参数无效
    """
    config = get_site_config(args.config) if getattr(args, 'config', None) else load_config_from_env()

    if getattr(args, 'command', None) != 'crawl':
        return config

    return config.with_overrides(
        site={
            "index_base_url": args.base_url,
            "extractor": args.extractor,
        },
        crawler={
            "worker_count": args.workers,
            "all_cores": args.all_cores,
            "start_page": args.page,
            "resume": args.resume,
            "fast_mode": args.fast_mode,
            "show_progress": args.show_progress,
        },
        storage={
            "download_dir": args.output_dir,
        },
        log={
            "log_level": args.log_level,
        },
    )


async def run_crawl(config: Config) -> Dict[str, Any]:
    """按配置运行一次完整爬取，致命错误向上抛出 SpiderError"""
    extractor = ExtractorFactory.create(config.site)
    checkpoint = CheckpointStore(config.storage.checkpoint_file)
    ledger = Ledger(config.storage.ledger_file)

    if config.crawler.all_cores:
        logger.info(f"💪 Using all cores! workers={config.crawler.effective_worker_count()}")

    async with PageFetcher(config) as fetcher:
        downloader = FileDownloader(config, fetcher.session)
        pipeline = Pipeline(config, extractor, fetcher, downloader, checkpoint, ledger)
        pipeline.prepare()
        start_page = resolve_start_page(config, checkpoint)
        return await pipeline.run(start_page)


async def handle_crawl(args) -> int:
    """处理 crawl 子命令"""
    print(f"\n📌 命令: 爬取并下载")

    try:
        config = build_config(args)
        # 提取器类型可能来自环境变量或站点预设，启动前校验
        if config.site.extractor not in ExtractorFactory.available():
            raise ValueError(
                f"未知的提取器类型: {config.site.extractor}，可用: {', '.join(ExtractorFactory.available())}"
            )
    except ValueError as e:
        logger.error(f"❌ 配置无效: {e}")
        return 1

    print(f"索引: {config.site.index_base_url}")
    print(f"下载目录: {config.storage.download_dir}")
    print(f"并发数: {config.crawler.effective_worker_count()}")
    print(f"模式: {'快速模式' if config.crawler.fast_mode else '慢速模式（每页下载完成后再继续）'}")

    try:
        stats = await run_crawl(config)
    except SpiderError as e:
        logger.error(f"❌ {e}")
        return 1

    print_statistics(stats)
    return 0


def print_statistics(stats: Dict[str, Any]):
    """输出统计信息"""
    print("\n" + "=" * 60)
    print("📊 爬取统计:")
    print(f"  索引页数: {stats.get('pages_crawled', 0)}")
    print(f"  发现详情页: {stats.get('detail_pages_found', 0)}")
    print(f"  详情页失败: {stats.get('detail_pages_failed', 0)}")
    print(f"  无下载链接: {stats.get('items_without_links', 0)}")
    print(f"  发现链接: {stats.get('links_discovered', 0)}")
    print(f"  下载成功: {stats.get('downloads_completed', 0)}")
    print(f"  下载失败: {stats.get('downloads_failed', 0)}")
    print("=" * 60)


async def handle_checkpoint_status(args) -> int:
    """处理 checkpoint-status 子命令"""
    try:
        config = build_config(args)
    except ValueError as e:
        logger.error(f"❌ 配置无效: {e}")
        return 1

    checkpoint = CheckpointStore(args.file or config.storage.checkpoint_file)

    print(f"\n📌 命令: 查看检查点状态")
    print(f"文件: {checkpoint.path}")

    if args.clear:
        try:
            cleared = checkpoint.clear()
        except SpiderError as e:
            logger.error(f"❌ {e}")
            return 1
        if cleared:
            print("✅ 检查点已清除")
        else:
            print("ℹ️  没有找到检查点")
        return 0

    page = checkpoint.load()
    if page is None:
        print("ℹ️  没有找到有效检查点")
        return 0

    print("\n" + "=" * 60)
    print("📂 检查点信息:")
    print(f"  最后完成页: {page}")
    print(f"  继续时从第 {page + 1} 页开始")
    print("=" * 60)
    return 0
