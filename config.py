"""
配置管理模块 - 电子书爬虫
统一配置管理：环境变量 / configs/ 下的站点预设 / 命令行覆盖
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Dict, Any
import os
import json
from pathlib import Path
from dotenv import load_dotenv
from loguru import logger

load_dotenv()

# 项目根目录
BASE_DIR = Path(__file__).parent
CONFIG_DIR = BASE_DIR / "configs"


class SiteConfig(BaseModel):
    """站点配置（索引页 / 详情页结构）"""
    model_config = ConfigDict(frozen=True)

    name: str = Field(default="allitebooks", description="站点名称")
    index_base_url: str = Field(default="http://www.allitebooks.com/page", description="索引页基础URL，页码拼接在末尾")
    no_results_sentinel: str = Field(default="No Posts Found.", description="索引结束标志文本")
    book_limit_per_page: int = Field(default=10, ge=1, description="每个索引页最多提取的详情页数量")
    default_category: str = Field(default="Uncategorized", description="未匹配到分类时使用的默认分类")

    # 提取器配置
    extractor: str = Field(default="regex", description="提取器类型: regex/soup")
    detail_link_pattern: str = Field(
        default=r'<h2 class="entry-title"><a href="([^"]*)" rel="bookmark"',
        description="详情页链接正则"
    )
    download_link_pattern: str = Field(
        default=r'<a href="(http://file\.allitebooks\.com/[^"]*\.pdf)" target="_blank">',
        description="下载链接正则"
    )
    category_pattern: str = Field(
        default=r'<dt>Category:</dt>.*?>([^<>]*)</a></dd>',
        description="分类正则"
    )
    detail_link_selector: str = Field(default="h2.entry-title a[rel=bookmark]", description="详情页链接选择器")
    download_link_selector: str = Field(default="a[target=_blank][href$='.pdf']", description="下载链接选择器")
    category_label: str = Field(default="Category:", description="分类标签文本（dt）")


class CrawlerConfig(BaseModel):
    """爬虫配置"""
    model_config = ConfigDict(frozen=True)

    # 并发控制
    worker_count: int = Field(default=10, ge=1, description="下载 worker 数量")
    all_cores: bool = Field(default=False, description="按CPU核数扩充 worker 数量")
    request_timeout: int = Field(default=60, description="请求超时时间（秒）")

    # 起始位置
    start_page: int = Field(default=1, ge=1, description="起始页码")
    resume: bool = Field(default=False, description="从检查点继续")

    # 一致性模式
    fast_mode: bool = Field(default=False, description="快速模式：不等待每页下载完成，也不写检查点")

    # 队列容量
    detail_queue_size: Optional[int] = Field(default=None, description="详情页队列容量（默认等于每页上限）")
    record_queue_size: int = Field(default=10, ge=1, description="记录队列容量")
    work_queue_size: int = Field(default=100, ge=1, description="下载任务队列容量")

    # User-Agent配置
    rotate_user_agent: bool = Field(default=True, description="是否轮换UA")
    show_progress: bool = Field(default=True, description="显示下载进度条")

    def effective_worker_count(self) -> int:
        """实际 worker 数量（all_cores 时不少于CPU核数）"""
        if self.all_cores:
            return max(self.worker_count, os.cpu_count() or 1)
        return self.worker_count


class StorageConfig(BaseModel):
    """存储配置"""
    model_config = ConfigDict(frozen=True)

    download_dir: Path = Field(default=Path("allitebooks"), description="下载根目录")
    checkpoint_file: Path = Field(default=Path("lastpagenumber.txt"), description="检查点文件")
    ledger_file: Path = Field(default=Path("links.csv"), description="链接台账文件")


class LogConfig(BaseModel):
    """日志配置"""
    model_config = ConfigDict(frozen=True)

    log_level: str = Field(default="INFO", description="日志级别")
    log_dir: Path = Field(default=BASE_DIR / "logs", description="日志目录")
    log_file: str = Field(default="spider.log", description="日志文件名")
    rotation: str = Field(default="100 MB", description="日志轮转大小")
    retention: str = Field(default="30 days", description="日志保留时间")


class Config(BaseModel):
    """全局配置（构造后不可变，各组件通过构造函数接收）"""
    model_config = ConfigDict(frozen=True)

    site: SiteConfig = Field(default_factory=SiteConfig)
    crawler: CrawlerConfig = Field(default_factory=CrawlerConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    log: LogConfig = Field(default_factory=LogConfig)

    def with_overrides(self, **sections: Dict[str, Any]) -> "Config":
        """
        返回应用了覆盖项的新配置

        Args:
            **sections: 按节名传入的覆盖字典，如 crawler={"fast_mode": True}；值为 None 的项忽略

        Returns:
            新的 Config 实例
        """
        data = self.model_dump()
        for section, values in sections.items():
            if section not in data:
                raise ValueError(f"未知的配置节: {section}")
            data[section].update({k: v for k, v in (values or {}).items() if v is not None})
        return Config(**data)


# ============================================================================
# 配置文件加载 - 从 configs/ 目录或任意路径加载
# ============================================================================

def load_config_file(config_file: Path) -> Dict[str, Any]:
    """
    加载站点配置文件

    Args:
        config_file: 配置文件路径

    Returns:
        配置字典

    Raises:
        FileNotFoundError: 配置文件不存在
        json.JSONDecodeError: JSON格式错误
    """
    with open(config_file, 'r', encoding='utf-8') as f:
        return json.load(f)


def create_config_from_dict(data: Dict[str, Any], base: Optional[Config] = None) -> Config:
    """
    从字典创建Config对象

    字典格式与 configs/*.json 一致：site / crawler / storage / log 四个节，均可省略。

    Args:
        data: 配置字典
        base: 基础配置（默认为环境变量配置）

    Returns:
        Config实例
    """
    base = base or load_config_from_env()
    return base.with_overrides(**{
        section: data.get(section, {})
        for section in ("site", "crawler", "storage", "log")
    })


def resolve_config_path(name: str) -> Path:
    """配置名 -> 路径：存在的文件路径直接使用，否则在 configs/ 下查找 {name}.json"""
    path = Path(name)
    if path.suffix == ".json" and path.exists():
        return path
    return CONFIG_DIR / f"{name}.json"


def get_site_config(name: str) -> Config:
    """
    获取站点配置

    Args:
        name: 配置名称（configs/ 目录下的文件名，不含.json后缀）或 JSON 文件路径

    Returns:
        Config实例

    Raises:
        ValueError: 未知的配置名称
    """
    path = resolve_config_path(name)
    if not path.exists():
        available = ", ".join(sorted(p.stem for p in CONFIG_DIR.glob("*.json"))) if CONFIG_DIR.exists() else ""
        raise ValueError(f"未知的站点配置: {name}，可用: {available}")
    data = load_config_file(path)
    logger.info(f"✅ 加载配置: {path.stem} ({data.get('site', {}).get('name', 'Unknown')})")
    return create_config_from_dict(data)


# 从环境变量加载配置
def load_config_from_env() -> Config:
    """从环境变量加载配置"""
    config_data = {
        "site": {
            "index_base_url": os.getenv("SPIDER_INDEX_BASE_URL", "http://www.allitebooks.com/page"),
            "extractor": os.getenv("SPIDER_EXTRACTOR", "regex"),
        },
        "crawler": {
            "worker_count": int(os.getenv("SPIDER_WORKER_COUNT", "10")),
            "all_cores": os.getenv("SPIDER_ALL_CORES", "false").lower() == "true",
            "fast_mode": os.getenv("SPIDER_FAST_MODE", "false").lower() == "true",
            "request_timeout": int(os.getenv("SPIDER_REQUEST_TIMEOUT", "60")),
        },
        "storage": {
            "download_dir": os.getenv("SPIDER_DOWNLOAD_DIR", "allitebooks"),
            "checkpoint_file": os.getenv("SPIDER_CHECKPOINT_FILE", "lastpagenumber.txt"),
            "ledger_file": os.getenv("SPIDER_LEDGER_FILE", "links.csv"),
        },
        "log": {
            "log_level": os.getenv("LOG_LEVEL", "INFO"),
        }
    }
    return Config(**config_data)
