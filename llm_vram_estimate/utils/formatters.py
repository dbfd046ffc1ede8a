"""
数据格式化工具

把估算结果格式化为表格、JSON或CSV，供命令行输出使用。
"""

import json
from typing import Dict, Any, List, Tuple
from tabulate import tabulate

from ..estimator.results import EstimationResult, Verdict


def format_gb(value: float) -> str:
    """格式化为保留两位小数的 GB 字符串"""
    return f"{value:.2f} GB"


def format_percent(value: float) -> str:
    return f"{value * 100:.0f}%"


def compatibility_message(result: EstimationResult) -> Tuple[str, List[str]]:
    """
    生成兼容性结论的标题和说明

    Returns:
        (标题, 说明行列表)
    """
    margin = f"{result.capacity.vram_margin_gb:.2f}"
    performance = f"预计性能: {result.tokens_per_second} tokens/s"
    verdict = result.advisory.verdict

    if verdict is Verdict.COMPATIBLE:
        return "配置兼容", [
            f"当前显卡配置 ({result.gpu_config}) 可以运行该模型，剩余 {margin}GB 显存。",
            performance,
        ]

    if verdict is Verdict.BORDERLINE:
        return "配置勉强可用", [
            f"当前显卡配置可以运行，但显存余量仅 {margin}GB，建议缩短上下文或增加显卡。",
            performance,
        ]

    lacking = f"{abs(result.capacity.vram_margin_gb):.2f}"
    return "显存不足", [
        f"当前显卡配置缺少 {lacking}GB 显存，可以考虑:",
        "  - 使用更多显卡",
        "  - 使用更低位宽的量化（如 8-bit）",
        "  - 缩短上下文长度",
        "  - 更换显存更大的显卡",
    ]


def format_results(result: EstimationResult, format_type: str = "table") -> str:
    """
    格式化估算结果

    Args:
        result: 估算结果
        format_type: 输出格式 ("table", "json", "csv")

    Returns:
        格式化后的字符串
    """
    if format_type == "json":
        return json.dumps(result.to_dict(), indent=2, ensure_ascii=False)

    elif format_type == "csv":
        return format_results_csv(result)

    else:  # table format
        return format_results_table(result)


def format_results_table(result: EstimationResult) -> str:
    """格式化为表格形式"""
    capacity = result.capacity
    power = result.power
    lines = []

    title, details = compatibility_message(result)
    lines.append(f"=== {title} ===")
    lines.extend(details)
    lines.append("")

    lines.append(f"显卡配置: {result.gpu_config}")
    lines.append("")

    memory_data = [
        ["所需显存", format_gb(capacity.total_gpu_ram_gb)],
        ["  模型权重", format_gb(capacity.base_model_gb)],
        ["  KV缓存", format_gb(capacity.kv_cache_gb)],
        ["  运行开销", format_gb(capacity.gpu_overhead_gb)],
        ["可用显存（总量）", format_gb(capacity.total_available_vram_gb)],
        ["可用显存（有效）", format_gb(capacity.effective_vram_gb)],
        ["显存余量", format_gb(capacity.vram_margin_gb)],
        ["所需系统内存", format_gb(capacity.total_system_ram_gb)],
        ["最低系统内存", format_gb(capacity.minimum_system_ram_gb)],
        ["存储空间", format_gb(capacity.storage_required_gb)],
        ["推荐CPU核心数", capacity.recommended_cores],
        ["系统要求满足", "是" if capacity.system_requirements_met else "否"],
    ]
    lines.append("资源需求:")
    lines.append(tabulate(memory_data, headers=["指标", "值"], tablefmt="grid"))

    lines.append("")
    lines.append(f"预计性能: {result.tokens_per_second} tokens/s")

    lines.append("")
    lines.append(f"功耗估算 (负载 {format_percent(power.utilization_factor)}):")
    power_data = [
        [item.name, item.count, f"{item.per_unit_watts}W", f"{item.total_watts}W"]
        for item in power.per_gpu_breakdown
    ]
    power_data.append(["系统开销", "", "", f"{power.system_overhead_watts}W"])
    power_data.append(["合计", "", "", f"{power.total_power_watts}W"])
    lines.append(tabulate(power_data, headers=["显卡", "数量", "单卡功耗", "总功耗"],
                          tablefmt="grid"))

    if result.advisory.warnings:
        lines.append("\n提示:")
        for i, warning in enumerate(result.advisory.warnings, 1):
            lines.append(f"{i}. {warning}")

    return "\n".join(lines)


def format_results_csv(result: EstimationResult) -> str:
    """格式化为CSV形式"""
    capacity = result.capacity

    headers = [
        "gpu_config", "verdict", "total_gpu_ram_gb", "base_model_gb", "kv_cache_gb",
        "effective_vram_gb", "vram_margin_gb", "total_system_ram_gb",
        "tokens_per_second", "total_power_watts"
    ]
    values = [
        f'"{result.gpu_config}"',
        result.advisory.verdict.value,
        f"{capacity.total_gpu_ram_gb:.2f}",
        f"{capacity.base_model_gb:.2f}",
        f"{capacity.kv_cache_gb:.2f}",
        f"{capacity.effective_vram_gb:.2f}",
        f"{capacity.vram_margin_gb:.2f}",
        f"{capacity.total_system_ram_gb:.2f}",
        str(result.tokens_per_second),
        str(result.power.total_power_watts),
    ]

    return "\n".join([",".join(headers), ",".join(values)])


def format_sweep_results(rows: List[Dict[str, Any]], output_format: str = "table") -> str:
    """
    格式化不同上下文长度下的估算结果

    Args:
        rows: 每行包含 context_tokens 和 result (EstimationResult)
    """
    if output_format == "json":
        return json.dumps([
            {"context_tokens": row["context_tokens"], **row["result"].to_dict()}
            for row in rows
        ], indent=2, ensure_ascii=False)

    data = []
    for row in rows:
        result = row["result"]
        data.append([
            row["context_tokens"],
            f"{result.capacity.kv_cache_gb:.2f}",
            f"{result.capacity.total_gpu_ram_gb:.2f}",
            f"{result.capacity.vram_margin_gb:.2f}",
            result.advisory.verdict.value,
        ])

    headers = ["上下文长度", "KV缓存(GB)", "所需显存(GB)", "显存余量(GB)", "结论"]

    if output_format == "csv":
        lines = [",".join(["context_tokens", "kv_cache_gb", "total_gpu_ram_gb",
                           "vram_margin_gb", "verdict"])]
        lines.extend(",".join(str(v) for v in item) for item in data)
        return "\n".join(lines)

    return tabulate(data, headers=headers, tablefmt="grid")
