# models.py
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class CommitRecord:
    """Git提交数据模型 (只读)"""

    hash: str
    tree: str
    parent_hash: Optional[str]
    parent_tree: Optional[str]
    author_name: str
    author_email: str
    message: str

    @property
    def is_root_commit(self) -> bool:
        return self.parent_hash is None


@dataclass(frozen=True)
class AnalysisResult:
    """评分服务针对单个提交返回的结果"""

    performance_score: float
    maintainability_score: float
    explanation: str = ""


@dataclass(frozen=True)
class CommitterSummary:
    """单个提交者的最终平均分"""

    name: str
    email: str
    mean_performance: float
    mean_maintainability: float
