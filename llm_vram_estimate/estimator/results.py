"""
估算结果数据结构

每次估算都会重新创建结果对象，结果之间不共享状态，只按结构比较相等。
"""

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Dict, Any, List, Optional


class Verdict(Enum):
    """兼容性结论"""
    COMPATIBLE = "compatible"      # 显存充足，余量为 0 或不少于 2GB
    BORDERLINE = "borderline"      # 可以运行，余量大于 0 但不足 2GB
    INSUFFICIENT = "insufficient"  # 有效显存不足


class ValidationErrorKind(Enum):
    """请求校验错误类型"""
    INVALID_PARAMETER_COUNT = "InvalidParameterCount"
    NO_GPU_SELECTED = "NoGpuSelected"
    INVALID_GPU_COUNT = "InvalidGpuCount"
    UNKNOWN_GPU_KEY = "UnknownGpuKey"
    INVALID_CONTEXT_LENGTH = "InvalidContextLength"
    UNSUPPORTED_QUANTIZATION = "UnsupportedQuantization"


@dataclass(frozen=True)
class ValidationError:
    """请求校验错误，作为返回值交给调用方处理"""
    kind: ValidationErrorKind
    message: str
    slot_index: Optional[int] = None  # 出错的显卡配置行，与具体行无关时为 None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.kind.value,
            "message": self.message,
            "slot_index": self.slot_index,
        }


@dataclass
class CapacityResult:
    """显存与系统资源估算结果（单位：GB）"""
    base_model_gb: float
    kv_cache_gb: float
    gpu_overhead_gb: float
    total_gpu_ram_gb: float
    total_system_ram_gb: float
    total_available_vram_gb: float
    effective_vram_gb: float
    multi_gpu_efficiency: float
    vram_margin_gb: float
    minimum_system_ram_gb: float
    storage_required_gb: float
    recommended_cores: int
    system_requirements_met: bool


@dataclass
class GpuPowerBreakdown:
    """单行显卡配置的功耗明细"""
    name: str
    count: int
    total_watts: int
    per_unit_watts: int


@dataclass
class PowerResult:
    """功耗估算结果（单位：W）"""
    total_power_watts: int
    per_gpu_breakdown: List[GpuPowerBreakdown]
    system_overhead_watts: int
    utilization_factor: float


@dataclass
class AdvisoryResult:
    """兼容性结论与提示信息"""
    verdict: Verdict
    warnings: List[str] = field(default_factory=list)

    @property
    def is_compatible(self) -> bool:
        return self.verdict is not Verdict.INSUFFICIENT

    @property
    def is_borderline(self) -> bool:
        return self.verdict is Verdict.BORDERLINE


@dataclass
class EstimationResult:
    """完整的估算结果"""
    capacity: CapacityResult
    tokens_per_second: int
    power: PowerResult
    advisory: AdvisoryResult
    gpu_config: str  # 显卡配置描述，仅用于展示

    def to_dict(self) -> Dict[str, Any]:
        """转换为可序列化的字典"""
        return {
            "gpu_config": self.gpu_config,
            "capacity": asdict(self.capacity),
            "tokens_per_second": self.tokens_per_second,
            "power": asdict(self.power),
            "advisory": {
                "verdict": self.advisory.verdict.value,
                "is_compatible": self.advisory.is_compatible,
                "is_borderline": self.advisory.is_borderline,
                "warnings": list(self.advisory.warnings),
            },
        }
