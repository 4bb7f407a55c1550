"""
CLI命令定义（argparse）
"""
import argparse


def create_parser() -> argparse.ArgumentParser:
    """
    创建命令行参数解析器

    Returns:
        ArgumentParser 实例
    """
    parser = argparse.ArgumentParser(
        prog='spider.py',
        description='电子书爬虫：爬取分页索引，按分类下载文件',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
示例:
  # 从第1页开始爬取（慢速模式：每页下载完成后再爬下一页）
  python spider.py crawl

  # 从上次保存的页码继续
  python spider.py crawl --continue

  # 快速模式，20个worker
  python spider.py crawl --fast --workers 20

  # 使用 configs/ 下的站点预设
  python spider.py crawl --config allitebooks_soup --page 3

  # 查看 / 清除检查点
  python spider.py checkpoint-status
  python spider.py checkpoint-status --clear
        '''
    )

    subparsers = parser.add_subparsers(dest='command', help='子命令', required=True)

    # ============================================================================
    # 子命令: crawl - 爬取并下载
    # ============================================================================
    parser_crawl = subparsers.add_parser('crawl', help='爬取索引页并下载文件')
    parser_crawl.add_argument('--config', type=str, default=None,
                              help='站点配置名 (configs/ 下，如 allitebooks) 或 JSON 文件路径')
    parser_crawl.add_argument('--workers', '--workerCount', dest='workers', type=int, default=None,
                              help='并发下载 worker 数量（默认：10）')
    parser_crawl.add_argument('--all-cores', '--allCores', dest='all_cores', action='store_true', default=None,
                              help='按CPU核数扩充 worker 数量')
    parser_crawl.add_argument('--page', type=int, default=None,
                              help='起始页码（默认：1）')
    parser_crawl.add_argument('--continue', dest='resume', action='store_true', default=None,
                              help='从上次保存的页码继续（覆盖 --page）')
    parser_crawl.add_argument('--fast', dest='fast_mode', action='store_true', default=None,
                              help='快速模式：不等待每页下载完成，不写检查点（中断时可能丢失正在下载的文件）')
    parser_crawl.add_argument('--base-url', type=str, default=None,
                              help='索引页基础URL（页码拼接在末尾）')
    parser_crawl.add_argument('--output-dir', type=str, default=None,
                              help='下载根目录')
    parser_crawl.add_argument('--extractor', type=str, default=None, choices=['regex', 'soup'],
                              help='提取器类型')
    parser_crawl.add_argument('--no-progress', dest='show_progress', action='store_false', default=None,
                              help='不显示下载进度条')
    parser_crawl.add_argument('--log-level', type=str, default=None,
                              help='日志级别（DEBUG/INFO/WARNING）')

    # ============================================================================
    # 子命令: checkpoint-status - 查看检查点状态
    # ============================================================================
    parser_checkpoint = subparsers.add_parser('checkpoint-status', help='查看检查点状态')
    parser_checkpoint.add_argument('--config', type=str, default=None, help='站点配置名（可选）')
    parser_checkpoint.add_argument('--file', type=str, default=None, help='检查点文件路径（覆盖配置）')
    parser_checkpoint.add_argument('--clear', action='store_true', help='清除检查点')

    return parser
