# config.py
"""
[V4.0] 全局配置
[V5.0] 改为提交评分配置：Git 命令格式、评分服务地址与凭证校验
"""
import logging
import os
from typing import Optional

from dotenv import load_dotenv

from errors import ConfigurationError

logger = logging.getLogger(__name__)


# --- (V3.0) 脚本基础路径 ---
SCRIPT_BASE_PATH = os.path.abspath(os.path.dirname(__file__))
env_path = os.path.join(SCRIPT_BASE_PATH, ".env")
if os.path.exists(env_path):
    load_dotenv(env_path)
    logger.debug(f"✅ 已从脚本目录加载 .env: {env_path}")
else:
    load_dotenv()
    logger.debug("⚠️ 未在脚本目录找到 .env，尝试从 CWD 加载。")


class GlobalConfig:
    """
    (V5.0) 提交评分的全局应用配置。
    常量定义为类属性；凭证等环境变量在实例化时读取。
    """

    # --- 路径配置 ---
    SCRIPT_BASE_PATH: str = SCRIPT_BASE_PATH

    # --- Git 命令格式 ---
    # 字段以 \x1f 分隔，记录以 \x1e 结尾，提交信息中可能含有换行
    GIT_LOG_FORMAT = [
        "git",
        "log",
        "--no-show-signature",
        "--topo-order",
        "--format=%H%x1f%T%x1f%P%x1f%an%x1f%ae%x1f%B%x1e",
    ]
    # 路径按原样输出 UTF-8，不做八进制转义
    GIT_DIFF_STAT_FORMAT = [
        "git",
        "-c",
        "core.quotepath=false",
        "diff-tree",
        "-r",
        "-M",
        "--no-color",
        "--stat={width}",
        "{old_tree}",
        "{new_tree}",
    ]
    DIFF_STAT_WIDTH: int = 80
    GIT_COMMAND_TIMEOUT: int = 120

    # =================================================================
    # --- 评分服务配置 ---
    # =================================================================
    DEFAULT_SCORING_ENDPOINT: str = "https://api.deepseek.com/v1/analyze"
    DEEPSEEK_BASE_URL: str = "https://api.deepseek.com"
    DEFAULT_MODEL_DEEPSEEK: str = "deepseek-chat"

    # 不需要凭证的供应商
    CREDENTIAL_FREE_PROVIDERS = ("mock",)

    def __init__(self):
        # 1. 供应商 API 密钥
        self.DEEPSEEK_API_KEY: str = os.getenv("DEEPSEEK_API_KEY", "")

        # 2. 应用程序默认值
        self.DEFAULT_SCORER: str = os.getenv("DEFAULT_SCORER", "http").lower()
        self.SCORING_ENDPOINT: str = os.getenv(
            "SCORING_ENDPOINT", self.DEFAULT_SCORING_ENDPOINT
        )
        self.SCORING_TIMEOUT: Optional[float] = _parse_timeout(
            os.getenv("SCORING_TIMEOUT", "")
        )

    def is_provider_configured(self, provider: str, api_key: str = "") -> bool:
        """
        检查特定供应商是否拿到了可用的凭证。
        """
        if provider in self.CREDENTIAL_FREE_PROVIDERS:
            return True
        return bool((api_key or self.DEEPSEEK_API_KEY).strip())

    def require_credential(self, provider: str, api_key: Optional[str]) -> str:
        """
        (V5.0) 启动时的凭证校验。缺失时抛出 ConfigurationError，而不是带着空凭证继续运行。
        """
        credential = (api_key or self.DEEPSEEK_API_KEY or "").strip()
        if not self.is_provider_configured(provider, credential):
            logger.error("❌ 未提供 API 密钥。请使用 --api-key 或设置 DEEPSEEK_API_KEY。")
            raise ConfigurationError(
                "缺少 API 密钥：请通过 --api-key 传入，或在环境变量/.env 中设置 DEEPSEEK_API_KEY。"
            )
        return credential


def _parse_timeout(raw: str) -> Optional[float]:
    if not raw.strip():
        return None
    try:
        value = float(raw)
    except ValueError:
        raise ConfigurationError(f"SCORING_TIMEOUT 不是有效的数字: {raw!r}")
    if value <= 0:
        raise ConfigurationError(f"SCORING_TIMEOUT 必须大于 0: {raw!r}")
    return value
