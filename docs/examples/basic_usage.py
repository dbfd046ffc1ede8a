#!/usr/bin/env python3
"""
LLM-VRAM-Estimate 基本使用示例

演示如何在代码中调用估算引擎。
"""

from llm_vram_estimate import (
    CompatibilityEstimator,
    GpuSlot,
    ModelRequest,
    ValidationError,
)
from llm_vram_estimate.utils.formatters import format_results


def main():
    """主函数"""
    print("=== LLM-VRAM-Estimate 基本使用示例 ===\n")

    estimator = CompatibilityEstimator()

    # 1. 7B 模型，FP16，两块 RTX 3090
    request = ModelRequest(
        params_billions=7,
        quant_bits=16,
        context_tokens=8192,
        gpu_slots=[GpuSlot(gpu_key="rtx3090", count=2)],
    )
    result = estimator.estimate(request)
    print(format_results(result))

    # 2. 校验失败时返回错误值而不是抛出异常
    print("\n未选择显卡时:")
    error = estimator.estimate(ModelRequest(params_billions=7, gpu_slots=[GpuSlot()]))
    if isinstance(error, ValidationError):
        print(f"  {error.kind.value}: {error.message}")

    print("\n=== 示例完成 ===")


if __name__ == "__main__":
    main()
