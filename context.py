# context.py
"""
[V4.0] 运行时配置的数据模型
"""
from dataclasses import dataclass
from typing import Optional

from config import GlobalConfig


@dataclass
class RunContext:
    """
    (V4.0) 封装一次运行所需的所有配置和状态。
    这是从 CLI 传递到 Orchestrator 的唯一对象。
    """

    # --- 核心路径 ---
    repo_path: str

    # --- 评分参数 ---
    scorer_id: str
    api_key: str
    endpoint: str
    timeout: Optional[float]

    # --- 全局配置 ---
    # 包含常量和 .env 加载的数据
    global_config: GlobalConfig
