# cli.py
"""
[V4.0] 命令行界面 (Interface) 层
[V5.0] 提交评分：一个仓库路径参数 + 凭证选项 (环境变量兜底)
"""
import argparse
import logging
import os
from typing import List, Optional

from config import GlobalConfig
from context import RunContext
from errors import ConfigurationError
from orchestrator import ScoringOrchestrator
import report_builder
import utils

logger = logging.getLogger(__name__)


def setup_parser() -> argparse.ArgumentParser:
    """
    (V4.0) 负责所有 argparse 的定义。
    """
    parser = argparse.ArgumentParser(
        prog="commit-score",
        description="按提交者汇总 Git 历史中每个提交的性能/可维护性评分",
        formatter_class=argparse.RawTextHelpFormatter,
    )

    parser.add_argument(
        "repo_path",
        metavar="REPO_PATH",
        help="要分析的 Git 仓库的根目录路径。",
    )
    parser.add_argument(
        "--api-key",
        type=str,
        default=None,
        help="评分服务的 API 密钥。\n(默认: 环境变量或 .env 中的 DEEPSEEK_API_KEY)",
    )
    parser.add_argument(
        "--scorer",
        type=str,
        default=None,
        help="评分供应商 (例如 'http', 'deepseek', 'mock')。\n(默认: DEFAULT_SCORER 或 'http')",
    )
    parser.add_argument(
        "--endpoint",
        type=str,
        default=None,
        help="(覆盖) http 供应商使用的评分接口地址。\n(默认: SCORING_ENDPOINT 或内置地址)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="输出 DEBUG 日志 (包括评分理由)"
    )

    return parser


def build_run_context(
    args: argparse.Namespace, global_config: GlobalConfig
) -> RunContext:
    """
    (V5.0) 校验配置并组装 RunContext。
    所有校验都发生在访问仓库之前；凭证缺失时抛出 ConfigurationError。
    """
    scorer_id = (args.scorer or global_config.DEFAULT_SCORER).lower()

    # 1. 凭证
    api_key = global_config.require_credential(scorer_id, args.api_key)

    # 2. 仓库路径 (只支持本地仓库)
    if args.repo_path.startswith(("http://", "https://", "git@")):
        logger.error("❌ 不支持远程仓库 URL，请先 clone 到本地。")
        raise ConfigurationError(f"不支持远程仓库 URL: {args.repo_path}")

    repo_path = os.path.abspath(args.repo_path)
    if not os.path.isdir(repo_path):
        logger.error(f"❌ 仓库路径不存在或不是目录: {repo_path}")
        raise ConfigurationError(f"仓库路径不存在或不是目录: {repo_path}")

    return RunContext(
        repo_path=repo_path,
        scorer_id=scorer_id,
        api_key=api_key,
        endpoint=args.endpoint or global_config.SCORING_ENDPOINT,
        timeout=global_config.SCORING_TIMEOUT,
        global_config=global_config,
    )


def run_cli(argv: Optional[List[str]] = None) -> str:
    """
    (V4.0) 主入口点。
    成功时打印并返回报告文本；任何错误原样抛出，由启动器决定退出码。
    """

    # 1. 解析 Args
    parser = setup_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        utils.setup_logging(logging.DEBUG)

    # 2. 加载 GlobalConfig 并组装 RunContext
    global_config = GlobalConfig()
    run_context = build_run_context(args, global_config)

    logger.info("=" * 50)
    logger.info("🚀 commit-score 启动...")
    logger.info(f"   [目标仓库]: {run_context.repo_path}")
    logger.info(f"   [评分供应商]: {run_context.scorer_id}")
    if run_context.scorer_id == "http":
        logger.info(f"   [评分接口]: {run_context.endpoint}")
    logger.info("=" * 50)

    # 3. 运行 Orchestrator
    orchestrator = ScoringOrchestrator(run_context)
    try:
        report = orchestrator.run()
    finally:
        orchestrator.close()

    # 4. 输出结果 (只有整次运行成功才会打印)
    text_report = report_builder.generate_text_report(report)
    print(text_report, end="")
    return text_report
