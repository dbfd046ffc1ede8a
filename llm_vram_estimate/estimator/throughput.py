"""
推理吞吐量估算器

按显卡 FP16 算力估算理论峰值，再乘以经验利用率和量化加速系数，
多卡时每增加一块显卡按 90% 的效率叠加。
"""

import logging
from typing import List, Optional

from ..hardware.catalog import GpuCatalog
from ..models.base import GpuSlot, ModelRequest
from .common import round_half_up

logger = logging.getLogger(__name__)


# 实际推理相对峰值算力的经验利用率
INFERENCE_EFFICIENCY = 0.05

# 相对 FP16 的量化吞吐系数
QUANT_THROUGHPUT_FACTORS = {
    32: 0.5,   # FP32 更慢
    16: 1.0,   # FP16 基准
    8: 1.8,    # INT8 明显更快
    4: 2.2,    # INT4 吞吐最高
}
DEFAULT_QUANT_THROUGHPUT_FACTOR = 1.0

ADDITIONAL_GPU_EFFICIENCY = 0.9
MAX_TOKENS_PER_SECOND = 200


def get_quant_throughput_factor(quant_bits: int) -> float:
    return QUANT_THROUGHPUT_FACTORS.get(quant_bits, DEFAULT_QUANT_THROUGHPUT_FACTOR)


class ThroughputEstimator:
    """吞吐量估算器"""

    def __init__(self, catalog: GpuCatalog):
        self.catalog = catalog

    def base_tokens_per_second(self, tflops: float, params_billions: float) -> float:
        """单卡 FP16 下的基础吞吐量 (tokens/s)"""
        return (tflops * 1e12) / (6 * params_billions * 1e9) * INFERENCE_EFFICIENCY

    def estimate_slot(self, slot: GpuSlot, params_billions: float,
                      quant_bits: int) -> Optional[float]:
        """
        估算单行显卡配置的吞吐量

        Returns:
            未选择显卡时返回 None，否则返回未取整的 tokens/s
        """
        if not slot.is_set:
            return None

        spec = self.catalog.get(slot.gpu_key)
        base_tps = self.base_tokens_per_second(spec.tflops, params_billions)
        quant_factor = get_quant_throughput_factor(quant_bits)

        # 第一块显卡按 100% 计，其余每块按 90% 叠加
        return base_tps * quant_factor * (1 + ADDITIONAL_GPU_EFFICIENCY * (slot.count - 1))

    def estimate_per_slot(self, request: ModelRequest) -> List[Optional[float]]:
        return [
            self.estimate_slot(slot, request.params_billions, request.quant_bits)
            for slot in request.gpu_slots
        ]

    def estimate(self, request: ModelRequest) -> int:
        """
        估算所有显卡的总吞吐量

        Returns:
            取整后的 tokens/s，上限为 200
        """
        per_slot = self.estimate_per_slot(request)
        total_tps = sum(tps or 0 for tps in per_slot)

        logger.debug("吞吐量估算: 各行=%s 合计=%.2f tokens/s", per_slot, total_tps)

        return round_half_up(min(max(total_tps, 0), MAX_TOKENS_PER_SECOND))
