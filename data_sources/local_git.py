# data_sources/local_git.py
import logging
import os
from typing import Iterator, Optional

from .base import DataSource
from models import CommitRecord
from context import RunContext
from errors import RepositoryAccessError
import git_utils

logger = logging.getLogger(__name__)


class LocalGitDataSource(DataSource):
    """
    [V4.5] 本地 Git 数据源实现。
    通过调用 git 命令行工具分析本地仓库。
    """

    def __init__(self, context: RunContext):
        self.context = context
        self.global_config = context.global_config
        self._empty_tree: Optional[str] = None

    def validate(self) -> None:
        if not os.path.isdir(self.context.repo_path):
            logger.error(f"❌ 路径不存在: {self.context.repo_path}")
            raise RepositoryAccessError(f"路径不存在: {self.context.repo_path}")
        if not git_utils.is_git_repository(self.context.repo_path):
            logger.error(f"❌ 指定路径不是 Git 仓库根目录: {self.context.repo_path}")
            raise RepositoryAccessError(
                f"指定路径不是 Git 仓库根目录: {self.context.repo_path}"
            )

    def iter_commits(self) -> Iterator[CommitRecord]:
        self.validate()
        head = git_utils.resolve_head(self.context.repo_path)
        if head is None:
            return
        logger.info(f"🔍 从 HEAD ({head[:12]}) 开始遍历提交历史...")
        log_output = git_utils.get_git_log(self.context.repo_path, self.global_config)
        yield from git_utils.parse_git_log(log_output)

    def diff_stats(self, old_tree: Optional[str], new_tree: str) -> str:
        if old_tree is None:
            old_tree = self._get_empty_tree()
        return git_utils.get_diff_stats(
            self.context.repo_path, old_tree, new_tree, self.global_config
        )

    def _get_empty_tree(self) -> str:
        if self._empty_tree is None:
            self._empty_tree = git_utils.get_empty_tree(self.context.repo_path)
        return self._empty_tree
