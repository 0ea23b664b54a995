# scorers/provider_abc.py
"""
[V3.5] 所有评分供应商的抽象基类 (ABC)。
[V4.1] 新增 Registry Pattern 支持，允许动态注册供应商。
[V5.0] 接口收窄为单个 analyze()：一次请求对应一个提交。
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Type

from context import RunContext
from errors import RemoteServiceError
from models import AnalysisResult

# --- [V4.1] 注册表机制 START ---
# 全局注册表，存储 "provider_id" -> Provider Class 的映射
PROVIDER_REGISTRY: Dict[str, Type["ScoringProvider"]] = {}


def register_provider(provider_id: str):
    """
    类装饰器：用于将具体的 Provider 实现类注册到全局注册表中。

    使用示例:
        @register_provider("http")
        class HttpScoringProvider(ScoringProvider):
            ...
    """

    def decorator(cls):
        if provider_id in PROVIDER_REGISTRY:
            raise ValueError(
                f"Provider id '{provider_id}' 已经被注册过 ({PROVIDER_REGISTRY[provider_id].__name__})"
            )
        PROVIDER_REGISTRY[provider_id] = cls
        return cls

    return decorator


# --- [V4.1] 注册表机制 END ---


class ScoringProvider(ABC):
    """
    (V5.0 接口) 评分供应商的抽象接口。
    """

    def __init__(self, context: RunContext):
        self.context = context
        self.global_config = context.global_config

    @abstractmethod
    def analyze(self, code_diff: str, commit_message: str) -> AnalysisResult:
        """对单个提交 (diffstat + 提交信息) 评分"""
        pass

    def close(self) -> None:
        """释放底层连接 (默认无操作)"""
        pass


def parse_analysis_payload(payload: Any) -> AnalysisResult:
    """
    把评分服务返回的 JSON 对象转换为 AnalysisResult。
    分数缺失或不是数字时抛出 RemoteServiceError；explanation 允许为空。
    """
    if not isinstance(payload, Mapping):
        raise RemoteServiceError(f"响应体不是 JSON 对象: {type(payload).__name__}")

    scores = {}
    for field in ("performance_score", "maintainability_score"):
        value = payload.get(field)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise RemoteServiceError(f"响应字段 '{field}' 缺失或不是数字: {value!r}")
        scores[field] = float(value)

    explanation = payload.get("explanation") or ""
    if not isinstance(explanation, str):
        explanation = str(explanation)

    return AnalysisResult(
        performance_score=scores["performance_score"],
        maintainability_score=scores["maintainability_score"],
        explanation=explanation,
    )
