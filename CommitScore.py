# CommitScore.py
"""
提交评分器 (V5.0)
- cli.py: 负责命令行界面和配置组装
- context.py: 负责运行时配置模型
- orchestrator.py: 负责核心业务逻辑
- CommitScore.py: 仅作为主入口启动器
"""

import logging
import sys
from typing import List, Optional

# 1. 初始化日志 (必须在所有模块导入之前完成)
import utils

utils.setup_logging()

logger = logging.getLogger(__name__)


def main(argv: Optional[List[str]] = None) -> int:
    # 延迟导入，确保日志已配置
    import cli
    from errors import CommitScoreError

    try:
        cli.run_cli(argv)
    except CommitScoreError as e:
        logger.error(f"❌ [{e.stage}] {e}")
        return e.exit_code
    except Exception as e:
        # 捕获所有未处理的全局异常
        logger.error(f"❌ 发生未处理的全局异常: {e}", exc_info=True)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
