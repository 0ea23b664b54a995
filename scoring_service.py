# scoring_service.py
import logging
import os
import importlib
from typing import Optional

from context import RunContext
from errors import ConfigurationError
from models import AnalysisResult

# (V4.1) 导入 Registry 和基类
from scorers.provider_abc import ScoringProvider, PROVIDER_REGISTRY

logger = logging.getLogger(__name__)


# --- (V4.1) 动态加载器 ---
def load_providers_dynamically(script_base_path: str):
    """
    (V4.1) 扫描 scorers/ 目录下的所有 *_provider.py 文件并导入它们。
    这将触发 @register_provider 装饰器，将类注册到 PROVIDER_REGISTRY 中。
    """
    scorers_dir = os.path.join(script_base_path, "scorers")
    if not os.path.exists(scorers_dir):
        logger.warning(f"⚠️ 未找到 scorers 目录: {scorers_dir}")
        return

    for filename in sorted(os.listdir(scorers_dir)):
        if filename.endswith("_provider.py"):
            # 构建模块名 (例如: scorers.http_provider)
            module_name = f"scorers.{filename[:-3]}"
            importlib.import_module(module_name)


# --- (V4.1) 工厂函数 ---
def get_scoring_provider(context: RunContext) -> ScoringProvider:
    """
    (V4.1) 工厂函数：基于 Registry Pattern 实现。
    从 PROVIDER_REGISTRY 查找供应商并实例化。
    """
    provider_id = context.scorer_id
    logger.info(f"ℹ️ (V4.1) 正在初始化评分供应商: {provider_id}")

    # 1. 动态加载所有可能的 providers
    load_providers_dynamically(context.global_config.SCRIPT_BASE_PATH)

    # 2. 从注册表中查找
    if provider_id not in PROVIDER_REGISTRY:
        logger.error(f"❌ 未知的评分供应商: '{provider_id}'")
        logger.error(f"   可用供应商: {sorted(PROVIDER_REGISTRY.keys())}")
        raise ConfigurationError(
            f"未知的评分供应商: {provider_id} (可用: {', '.join(sorted(PROVIDER_REGISTRY))})"
        )

    # 3. 检查配置
    if not context.global_config.is_provider_configured(provider_id, context.api_key):
        logger.error(f"❌ 供应商 '{provider_id}' 未配置 API Key。")
        raise ConfigurationError(
            f"供应商 '{provider_id}' 未配置。请通过 --api-key 或 .env 设置 DEEPSEEK_API_KEY。"
        )

    # 4. 实例化
    provider_class = PROVIDER_REGISTRY[provider_id]
    return provider_class(context)


class ScoringService:
    """
    (V5.0) 封装所有对评分服务的调用。
    - 由 RunContext 初始化。
    - 每个提交一次请求；不缓存，不重试，错误原样向上抛出。
    """

    def __init__(self, context: RunContext, provider: Optional[ScoringProvider] = None):
        self.context = context
        self.provider: ScoringProvider = provider or get_scoring_provider(context)
        logger.info(
            f"✅ 🤖 评分服务已成功初始化 (Provider: {self.provider.__class__.__name__})"
        )

    def analyze_commit(self, code_diff: str, commit_message: str) -> AnalysisResult:
        subject = commit_message.strip().splitlines()[0] if commit_message.strip() else ""
        logger.info(f"🤖 正在评分: {subject[:60]}")
        result = self.provider.analyze(code_diff, commit_message)
        logger.debug(
            f"   得分 performance={result.performance_score} "
            f"maintainability={result.maintainability_score} | {result.explanation}"
        )
        return result

    def close(self):
        self.provider.close()
