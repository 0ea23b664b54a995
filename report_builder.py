# report_builder.py
"""
[V5.0] 报告生成器
把汇总结果渲染为纯文本：每位提交者一个块，块之间以空行分隔。
"""
from typing import List

from aggregator import AggregateReport


def generate_text_report(report: AggregateReport) -> str:
    """
    生成纯文本格式的报告 (用于终端输出)。
    遍历顺序即汇总结果的映射顺序。
    """
    lines: List[str] = []
    for summary in report.values():
        lines.append(f"Committer: {summary.name} <{summary.email}>")
        lines.append(f"  Performance Score: {summary.mean_performance:.2f}")
        lines.append(f"  Maintainability Score: {summary.mean_maintainability:.2f}")
        lines.append("")
    if not lines:
        return ""
    return "\n".join(lines) + "\n"
