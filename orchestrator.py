# orchestrator.py
"""
[V4.0] 业务逻辑编排器
[V5.0] 改为提交评分流水线：遍历提交 -> diffstat -> 远程评分 -> 按邮箱汇总
- 严格串行：上一个提交评分完成之前，不会开始下一个提交的 diff 计算
- 任一阶段失败立即终止 (FAILED)，不输出部分结果
"""
import enum
import logging
from typing import Optional

from context import RunContext
from errors import CommitScoreError
from aggregator import AggregateReport, CommitterStatsBuilder
from scoring_service import ScoringService
from data_sources.base import DataSource
from data_sources.factory import get_data_source

logger = logging.getLogger(__name__)


class PipelineState(enum.Enum):
    WALKING = "walking"
    SCORING = "scoring"
    DONE = "done"
    FAILED = "failed"


class ScoringOrchestrator:
    """
    (V4.0) 负责执行评分流水线的核心业务逻辑。
    """

    def __init__(
        self,
        context: RunContext,
        data_source: Optional[DataSource] = None,
        scoring_service: Optional[ScoringService] = None,
    ):
        self.context = context
        self.data_source = data_source or get_data_source(context)
        self.scoring_service = scoring_service
        self.state: Optional[PipelineState] = None
        self.commits_scored = 0

        logger.info("✅ ScoringOrchestrator 已初始化")

    def run(self) -> AggregateReport:
        """
        执行核心业务流程，返回按邮箱汇总后的只读结果。
        """
        builder = CommitterStatsBuilder()
        self.commits_scored = 0

        try:
            # 评分服务在进入遍历之前创建，供应商配置错误会在访问仓库前暴露
            if self.scoring_service is None:
                self.scoring_service = ScoringService(self.context)

            self.state = PipelineState.WALKING
            for commit in self.data_source.iter_commits():
                self.state = PipelineState.SCORING
                code_diff = self.data_source.diff_stats(commit.parent_tree, commit.tree)
                analysis = self.scoring_service.analyze_commit(code_diff, commit.message)
                builder.record(
                    commit.author_email,
                    commit.author_name,
                    analysis.performance_score,
                    analysis.maintainability_score,
                )
                self.commits_scored += 1
                self.state = PipelineState.WALKING

            report = builder.finalize()
        except CommitScoreError as e:
            self.state = PipelineState.FAILED
            logger.error(
                f"❌ 流水线在 [{e.stage}] 阶段终止 (已评分 {self.commits_scored} 个提交): {e}"
            )
            raise

        self.state = PipelineState.DONE
        logger.info(f"✅ 流水线完成，共评分 {self.commits_scored} 个提交。")
        return report

    def close(self):
        if self.scoring_service is not None:
            self.scoring_service.close()
