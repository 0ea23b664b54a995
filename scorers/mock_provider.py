# scorers/mock_provider.py
"""
[测试样例] 一个模拟的评分供应商
不进行任何网络调用，用于离线演练与验证动态注册机制 (Registry Pattern)。
"""
import logging
from scorers.provider_abc import ScoringProvider, register_provider
from context import RunContext
from models import AnalysisResult

logger = logging.getLogger(__name__)


# 核心测试点：使用装饰器注册 ID 为 "mock"
@register_provider("mock")
class MockProvider(ScoringProvider):
    """
    模拟的 Provider，总是返回固定分数，结果完全可复现。
    """

    PERFORMANCE_SCORE = 5.0
    MAINTAINABILITY_SCORE = 5.0

    def __init__(self, context: RunContext):
        super().__init__(context)
        logger.info("✅ MockProvider 已初始化 (无需 API Key)")

    def analyze(self, code_diff: str, commit_message: str) -> AnalysisResult:
        return AnalysisResult(
            performance_score=self.PERFORMANCE_SCORE,
            maintainability_score=self.MAINTAINABILITY_SCORE,
            explanation=f"[Mock] {commit_message[:20]}",
        )
