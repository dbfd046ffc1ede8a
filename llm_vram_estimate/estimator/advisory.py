"""
兼容性判断与提示生成

根据容量估算结果给出兼容性结论，并根据请求和显卡配置生成提示信息。
提示信息与结论无关，按固定顺序全部列出。
"""

from typing import List

from ..hardware.catalog import GpuCatalog
from ..models.base import ModelRequest
from .common import pick_by_tier
from .results import AdvisoryResult, CapacityResult, Verdict


BORDERLINE_MARGIN_GB = 2.0
LONG_CONTEXT_TOKENS = 32768
MAX_SLOTS_WITHOUT_SCALING_WARNING = 2
MULTI_GPU_RECOMMENDED_PARAMS = 13

RAM_TIER_MESSAGES = (
    "小型模型（≤3B）：8GB 系统内存即可满足需求",
    "中型模型（≤7B）：建议至少 16GB 系统内存",
    "中大型模型（≤13B）：建议至少 32GB 系统内存",
    "大型模型（>13B）：建议 64GB 及以上系统内存",
)

QUANTIZATION_MESSAGES = {
    4: "4-bit 量化可大幅降低显存占用，但可能带来较明显的精度损失",
    8: "8-bit 量化在显存占用和精度之间较为平衡，精度损失通常较小",
}

DRIVER_SUPPORT_MESSAGE = "AMD Radeon 显卡依赖 ROCm，仅部分操作系统和驱动版本受支持，请确认兼容性"
LONG_CONTEXT_MESSAGE = "上下文超过 32K 时 KV 缓存占用显著增加，实际显存需求可能高于估算值"
FP16_LONG_CONTEXT_MESSAGE = "FP16 精度配合超长上下文对显存压力很大，建议考虑 8-bit 量化"
MULTI_SLOT_MESSAGE = "超过两组显卡配置时，多卡扩展效率会进一步下降"
OLDEST_GENERATION_MESSAGE = "{generation} 架构显卡对新推理框架的优化支持有限，性能可能低于预期"
LARGE_MODEL_MESSAGE = "超过 13B 参数的模型通常能从多卡配置中获益"
MIXED_GENERATION_MESSAGE = "混合使用不同架构的显卡时，整体性能可能受限于较慢的显卡"


def determine_verdict(capacity: CapacityResult) -> Verdict:
    """
    判断兼容性结论

    有效显存不足为 INSUFFICIENT；余量大于 0 且小于 2GB 为 BORDERLINE，其余为 COMPATIBLE。
    """
    if capacity.effective_vram_gb < capacity.total_gpu_ram_gb:
        return Verdict.INSUFFICIENT
    if 0 < capacity.vram_margin_gb < BORDERLINE_MARGIN_GB:
        return Verdict.BORDERLINE
    return Verdict.COMPATIBLE


class AdvisoryEngine:
    """兼容性判断与提示生成器"""

    def __init__(self, catalog: GpuCatalog):
        self.catalog = catalog

    def generate_warnings(self, request: ModelRequest) -> List[str]:
        """按固定顺序生成所有适用的提示信息"""
        warnings = []
        selected = request.selected_slots()
        specs = [self.catalog.get(slot.gpu_key) for slot in selected]
        generations = {spec.generation for spec in specs}

        warnings.append(pick_by_tier(request.params_billions, RAM_TIER_MESSAGES))

        if any(self.catalog.requires_driver_caveat(spec.key) for spec in specs):
            warnings.append(DRIVER_SUPPORT_MESSAGE)

        if request.quant_bits in QUANTIZATION_MESSAGES:
            warnings.append(QUANTIZATION_MESSAGES[request.quant_bits])

        if request.context_tokens > LONG_CONTEXT_TOKENS:
            warnings.append(LONG_CONTEXT_MESSAGE)
            if request.quant_bits == 16:
                warnings.append(FP16_LONG_CONTEXT_MESSAGE)

        if len(selected) > MAX_SLOTS_WITHOUT_SCALING_WARNING:
            warnings.append(MULTI_SLOT_MESSAGE)

        oldest = self.catalog.oldest_generation
        if oldest is not None and oldest in generations:
            warnings.append(OLDEST_GENERATION_MESSAGE.format(generation=oldest))

        if request.params_billions > MULTI_GPU_RECOMMENDED_PARAMS:
            warnings.append(LARGE_MODEL_MESSAGE)

        if len(generations) > 1:
            warnings.append(MIXED_GENERATION_MESSAGE)

        return warnings

    def evaluate(self, request: ModelRequest, capacity: CapacityResult) -> AdvisoryResult:
        return AdvisoryResult(
            verdict=determine_verdict(capacity),
            warnings=self.generate_warnings(request),
        )
