# errors.py
"""
[V5.0] 统一异常体系
所有流水线错误都继承自 CommitScoreError，并携带出错阶段 (stage) 与进程退出码。
任何错误都会终止整次运行，不做重试，也不会降级为跳过单个提交。
"""
from typing import Optional


class CommitScoreError(Exception):
    """流水线错误基类"""

    stage: str = "未知阶段"
    exit_code: int = 1


class ConfigurationError(CommitScoreError):
    """缺少/无效的凭证，或无效的仓库路径"""

    stage = "配置"
    exit_code = 2


class RepositoryAccessError(CommitScoreError):
    """仓库无法打开，或 HEAD 无法解析"""

    stage = "仓库访问"


class DiffComputationError(CommitScoreError):
    """树解析或 diffstat 生成失败"""

    stage = "Diff 统计"


class ScoringError(CommitScoreError):
    """评分服务调用失败的公共基类"""

    stage = "远程评分"

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AuthenticationError(ScoringError):
    """凭证被评分服务拒绝"""

    pass


class RemoteServiceError(ScoringError):
    """非成功响应，或响应体格式错误"""

    pass


class TransportError(ScoringError):
    """网络连接层面的失败"""

    pass


class EmptySeriesError(CommitScoreError):
    """某个提交者没有任何分数记录 (理论上不可达)"""

    stage = "汇总"
