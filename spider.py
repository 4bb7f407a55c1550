"""
电子书爬虫 - 命令行入口

索引爬取 -> 详情页提取 -> 分类下载，支持断点续传和快速模式。
"""
import asyncio
import sys
from loguru import logger

from cli.commands import create_parser
from cli.handlers import build_config, handle_crawl, handle_checkpoint_status
from config import LogConfig


def setup_logging(log_config: LogConfig):
    """配置日志：彩色 stderr + 按大小轮转的文件日志"""
    logger.remove()
    logger.add(
        sys.stderr,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>",
        level=log_config.log_level.upper(),
        colorize=True
    )

    log_file = log_config.log_dir / log_config.log_file
    log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_file,
        rotation=log_config.rotation,
        retention=log_config.retention,
        encoding="utf-8",
        level="DEBUG"
    )


async def main(argv=None) -> int:
    """主函数"""
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        log_config = build_config(args).log
    except ValueError:
        log_config = LogConfig()
    setup_logging(log_config)

    print("\n" + "=" * 60)
    print("📚 电子书爬虫")
    print("=" * 60)

    if args.command == 'crawl':
        return await handle_crawl(args)
    elif args.command == 'checkpoint-status':
        return await handle_checkpoint_status(args)
    return 1


def cli_main():
    """console_scripts 入口"""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    cli_main()
