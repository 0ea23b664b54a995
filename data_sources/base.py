# data_sources/base.py
from abc import ABC, abstractmethod
from typing import Iterator, Optional

from models import CommitRecord


class DataSource(ABC):
    """
    [V4.5] 数据源抽象基类
    [V5.0] 收窄为评分流水线需要的两项能力：遍历提交、计算两棵树之间的 diffstat。
    """

    @abstractmethod
    def validate(self) -> None:
        """
        验证数据源是否可用 (路径是否为 Git 仓库，HEAD 是否可解析)。
        不可用时抛出 RepositoryAccessError。
        """
        pass

    @abstractmethod
    def iter_commits(self) -> Iterator[CommitRecord]:
        """
        按拓扑顺序产出 HEAD 可达的每个提交，且每个提交只出现一次。
        """
        pass

    @abstractmethod
    def diff_stats(self, old_tree: Optional[str], new_tree: str) -> str:
        """
        计算 old_tree -> new_tree 的 diffstat 文本。
        old_tree 为 None 表示与空树比较 (根提交)。
        """
        pass
