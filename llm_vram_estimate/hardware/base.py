"""
基础硬件类定义

定义显卡规格数据结构以及目录查询相关的异常。
"""

from dataclasses import dataclass, asdict
from typing import Dict, Any


class UnknownGpuKeyError(KeyError, ValueError):
    """显卡目录中不存在指定的显卡标识"""

    def __init__(self, gpu_key: str):
        super().__init__(gpu_key)
        self.gpu_key = gpu_key

    def __str__(self) -> str:
        return f"不支持的显卡型号: {self.gpu_key}"


@dataclass(frozen=True)
class GpuSpec:
    """显卡规格数据类"""
    key: str              # 目录中的唯一标识，如 "rtx4090"
    name: str             # 显示名称
    vram_gb: float        # 显存容量 (GB)
    generation: str       # 架构代际，如 "Ampere"
    tflops: float         # FP16 算力 (TFLOPS)
    tdp_watts: float      # 热设计功耗 (W)

    def validate(self) -> None:
        """检查规格数值是否合法"""
        for field_name in ("vram_gb", "tflops", "tdp_watts"):
            value = getattr(self, field_name)
            if not value > 0:
                raise ValueError(f"{self.key}: {field_name} 必须大于0，当前值: {value}")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
