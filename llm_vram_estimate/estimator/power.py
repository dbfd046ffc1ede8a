"""
功耗估算器

以显卡 TDP 乘以量化相关的利用率估算单卡功耗，
加上多卡互联开销和按模型规模划分的系统基础功耗。
"""

import logging

from ..hardware.catalog import GpuCatalog
from ..models.base import ModelRequest
from .common import pick_by_tier, round_half_up
from .results import GpuPowerBreakdown, PowerResult

logger = logging.getLogger(__name__)


# 不同量化位宽下显卡的平均负载
UTILIZATION_FACTORS = {
    32: 0.85,
    16: 0.75,
    8: 0.65,
    4: 0.60,
}
DEFAULT_UTILIZATION_FACTOR = 0.75

# 按模型规模档位的系统基础功耗 (W)：CPU、内存、存储等
BASE_SYSTEM_OVERHEAD_WATTS = (75, 100, 150, 200)

MULTI_GPU_OVERHEAD_RATIO = 0.1
EXTRA_GPU_SYSTEM_WATTS = 25


def get_utilization_factor(quant_bits: int) -> float:
    return UTILIZATION_FACTORS.get(quant_bits, DEFAULT_UTILIZATION_FACTOR)


class PowerEstimator:
    """功耗估算器"""

    def __init__(self, catalog: GpuCatalog):
        self.catalog = catalog

    def estimate(self, request: ModelRequest) -> PowerResult:
        """
        估算整机功耗

        Args:
            request: 已通过校验的估算请求

        Returns:
            PowerResult，包含每行显卡的功耗明细
        """
        utilization = get_utilization_factor(request.quant_bits)
        system_overhead = pick_by_tier(request.params_billions, BASE_SYSTEM_OVERHEAD_WATTS)

        breakdown = []
        gpu_watts = 0
        for slot in request.selected_slots():
            spec = self.catalog.get(slot.gpu_key)
            count = slot.count

            per_unit_watts = round_half_up(spec.tdp_watts * utilization)
            multi_gpu_overhead = 0.0
            if count > 1:
                multi_gpu_overhead = (count - 1) * MULTI_GPU_OVERHEAD_RATIO * per_unit_watts
            slot_total_watts = round_half_up(per_unit_watts * count + multi_gpu_overhead)

            breakdown.append(GpuPowerBreakdown(
                name=spec.name,
                count=count,
                total_watts=slot_total_watts,
                per_unit_watts=per_unit_watts,
            ))
            gpu_watts += slot_total_watts
            system_overhead += (count - 1) * EXTRA_GPU_SYSTEM_WATTS

        total_power_watts = round_half_up(gpu_watts + system_overhead)

        logger.debug("功耗估算: 显卡=%dW 系统开销=%sW 合计=%dW",
                     gpu_watts, system_overhead, total_power_watts)

        return PowerResult(
            total_power_watts=total_power_watts,
            per_gpu_breakdown=breakdown,
            system_overhead_watts=system_overhead,
            utilization_factor=utilization,
        )
