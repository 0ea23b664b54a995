# data_sources/factory.py
import logging
from context import RunContext
from .base import DataSource
from .local_git import LocalGitDataSource

logger = logging.getLogger(__name__)


def get_data_source(context: RunContext) -> DataSource:
    """
    [V4.5] 数据源工厂
    [V5.0] 仅支持本地仓库 (远程 URL 已在 CLI 层被拒绝)
    """
    logger.info("🔌 [Factory] 初始化数据源: Local Git")
    return LocalGitDataSource(context)
