# aggregator.py
"""
[V5.0] 按提交者邮箱汇总评分
- CommitterStatsBuilder: 遍历期间逐条 record()
- finalize(): 单向转换为只读的 AggregateReport，之后不可再写入
"""
import logging
import statistics
from dataclasses import dataclass, field
from collections import abc
from types import MappingProxyType
from typing import Dict, Iterator, List

from errors import EmptySeriesError
from models import CommitterSummary

logger = logging.getLogger(__name__)


@dataclass
class CommitterStats:
    """单个提交者的累加器"""

    name: str
    email: str
    performance_scores: List[float] = field(default_factory=list)
    maintainability_scores: List[float] = field(default_factory=list)


class AggregateReport(abc.Mapping):
    """finalize() 的结果：email -> CommitterSummary 的只读映射"""

    def __init__(self, summaries: Dict[str, CommitterSummary]):
        self._summaries = MappingProxyType(dict(summaries))

    def __getitem__(self, email: str) -> CommitterSummary:
        return self._summaries[email]

    def __iter__(self) -> Iterator[str]:
        return iter(self._summaries)

    def __len__(self) -> int:
        return len(self._summaries)

    def __repr__(self) -> str:
        return f"AggregateReport({dict(self._summaries)!r})"


class CommitterStatsBuilder:
    def __init__(self):
        self._stats: Dict[str, CommitterStats] = {}
        self._finalized = False

    def record(
        self,
        email: str,
        display_name: str,
        performance_score: float,
        maintainability_score: float,
    ) -> None:
        if self._finalized:
            raise RuntimeError("汇总已完成，不能再记录新的分数")

        stats = self._stats.get(email)
        if stats is None:
            # 显示名以第一次出现时为准
            stats = CommitterStats(name=display_name, email=email)
            self._stats[email] = stats
        stats.performance_scores.append(performance_score)
        stats.maintainability_scores.append(maintainability_score)

    def finalize(self) -> AggregateReport:
        if self._finalized:
            raise RuntimeError("finalize() 只能调用一次")

        summaries: Dict[str, CommitterSummary] = {}
        for email, stats in self._stats.items():
            if not stats.performance_scores or not stats.maintainability_scores:
                raise EmptySeriesError(f"提交者 {email} 没有任何分数记录")
            summaries[email] = CommitterSummary(
                name=stats.name,
                email=email,
                mean_performance=statistics.fmean(stats.performance_scores),
                mean_maintainability=statistics.fmean(stats.maintainability_scores),
            )

        self._finalized = True
        logger.info(f"✅ 汇总完成，共 {len(summaries)} 位提交者")
        return AggregateReport(summaries)
