# git_utils.py
import os
import subprocess
import logging
from typing import Dict, List, Optional, Type

from config import GlobalConfig
from errors import CommitScoreError, DiffComputationError, RepositoryAccessError
from models import CommitRecord

logger = logging.getLogger(__name__)

FIELD_SEP = "\x1f"
RECORD_SEP = "\x1e"
UNKNOWN_IDENTITY = "unknown"


def run_git_command(
    cmd: List[str],
    repo_path: str,
    context: str = "执行Git命令",
    error_cls: Type[CommitScoreError] = RepositoryAccessError,
    input_text: Optional[str] = None,
    timeout: int = GlobalConfig.GIT_COMMAND_TIMEOUT,
) -> str:
    """
    (V5.0 修改) 统一的Git命令执行函数
    - 在 repo_path 下执行
    - 失败时抛出 error_cls，而不是返回 None
    """
    logger.debug(f"在 {repo_path} 中执行命令: {' '.join(cmd)}")
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            input=input_text,
            timeout=timeout,
            cwd=repo_path,
        )
    except subprocess.TimeoutExpired as e:
        logger.error(f"{context}超时")
        raise error_cls(f"{context}超时 ({timeout}s)") from e
    except OSError as e:
        logger.error(f"{context}出错: {e}")
        raise error_cls(f"{context}出错: {e}") from e

    if result.returncode != 0:
        stderr = result.stderr.strip()
        logger.error(f"{context}失败: {stderr}")
        raise error_cls(f"{context}失败: {stderr or f'退出码 {result.returncode}'}")
    logger.debug(f"{context}成功，输出 {len(result.stdout.splitlines())} 行")
    return result.stdout


def _rev_parse(repo_path: str, option: str) -> Optional[str]:
    try:
        result = subprocess.run(
            ["git", "rev-parse", option],
            capture_output=True,
            text=True,
            cwd=repo_path,
        )
    except OSError:
        return None
    if result.returncode != 0:
        return None
    return result.stdout.strip()


def is_git_repository(repo_path: str) -> bool:
    """
    检查指定路径本身是否为Git仓库 (工作区根目录或裸仓库/.git 目录)。
    git 会向上查找外层仓库，因此仓库内的子目录在这里返回 False。
    """
    git_dir = _rev_parse(repo_path, "--absolute-git-dir")
    if git_dir is None:
        return False

    target = os.path.realpath(repo_path)
    if os.path.realpath(git_dir) == target:
        return True
    toplevel = _rev_parse(repo_path, "--show-toplevel")
    return toplevel is not None and os.path.realpath(toplevel) == target


def resolve_head(repo_path: str) -> Optional[str]:
    """
    (V5.0) 解析 HEAD 指向的提交。
    - 新建的空仓库 (HEAD 指向尚不存在的分支) 返回 None
    - 其它无法解析的情况抛出 RepositoryAccessError
    """
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--verify", "--quiet", "HEAD^{commit}"],
            capture_output=True,
            text=True,
            cwd=repo_path,
        )
        if result.returncode == 0:
            return result.stdout.strip()

        symbolic = subprocess.run(
            ["git", "symbolic-ref", "--quiet", "HEAD"],
            capture_output=True,
            text=True,
            cwd=repo_path,
        )
    except OSError as e:
        raise RepositoryAccessError(f"解析 HEAD 出错: {e}") from e

    if symbolic.returncode == 0:
        logger.info(f"ℹ️ HEAD 指向尚无提交的分支 {symbolic.stdout.strip()}，仓库为空。")
        return None
    raise RepositoryAccessError(f"无法解析 HEAD: {repo_path}")


def get_empty_tree(repo_path: str) -> str:
    """计算当前仓库哈希算法下空树的 ID (兼容 SHA-1 / SHA-256 仓库)"""
    output = run_git_command(
        ["git", "hash-object", "-t", "tree", "--stdin"],
        repo_path,
        "计算空树 ID",
        error_cls=DiffComputationError,
        input_text="",
    )
    return output.strip()


def parse_single_commit(record: str, tree_by_hash: Dict[str, str]) -> CommitRecord:
    """解析单条提交记录"""
    parts = record.split(FIELD_SEP, 5)
    if len(parts) != 6:
        raise RepositoryAccessError(f"提交格式异常: {record[:80]!r}")
    commit_hash, tree, parents, name, email, message = parts

    # 只取第一个父提交，合并提交的其它父提交被忽略
    parent_hash = parents.split()[0] if parents.strip() else None
    parent_tree = None
    if parent_hash:
        # 父提交不在本次遍历结果中时 (如浅克隆)，交给 git 在 diff 时解析
        parent_tree = tree_by_hash.get(parent_hash, f"{parent_hash}^{{tree}}")

    return CommitRecord(
        hash=commit_hash,
        tree=tree,
        parent_hash=parent_hash,
        parent_tree=parent_tree,
        author_name=name or UNKNOWN_IDENTITY,
        author_email=email or UNKNOWN_IDENTITY,
        message=message,
    )


def parse_git_log(log_output: str) -> List[CommitRecord]:
    """解析Git日志输出"""
    records = [
        chunk.lstrip("\n")
        for chunk in log_output.split(RECORD_SEP)
        if chunk.strip()
    ]
    if not records:
        logger.warning("Git日志输出为空")
        return []

    tree_by_hash: Dict[str, str] = {}
    for record in records:
        fields = record.split(FIELD_SEP, 2)
        if len(fields) >= 2:
            tree_by_hash[fields[0]] = fields[1]

    commits = [parse_single_commit(record, tree_by_hash) for record in records]
    logger.info(f"成功解析 {len(commits)} 个提交")
    return commits


def get_git_log(repo_path: str, global_config: GlobalConfig) -> str:
    """获取 HEAD 可达的全部提交历史"""
    return run_git_command(
        global_config.GIT_LOG_FORMAT + ["HEAD"],
        repo_path,
        "获取Git提交历史",
    )


def get_diff_stats(
    repo_path: str,
    old_tree: str,
    new_tree: str,
    global_config: GlobalConfig,
) -> str:
    """
    (V5.0) 生成两棵树之间的 diffstat 报告 (开启重命名检测，固定宽度)
    """
    cmd = [
        part.format(
            width=global_config.DIFF_STAT_WIDTH,
            old_tree=old_tree,
            new_tree=new_tree,
        )
        for part in global_config.GIT_DIFF_STAT_FORMAT
    ]
    return run_git_command(
        cmd,
        repo_path,
        f"获取 {new_tree[:12]} 的 diffstat",
        error_cls=DiffComputationError,
    )
