"""
显存容量估算器

估算模型权重、KV缓存和运行开销所需的显存，
并与多卡配置的可用显存以及系统内存需求进行比较。
"""

import logging
import math
from typing import Sequence

from ..hardware.catalog import GpuCatalog
from ..models.base import GpuSlot, ModelRequest
from .common import GB, pick_by_tier
from .results import CapacityResult

logger = logging.getLogger(__name__)


# 系统内存相对显存需求的倍数
SYSTEM_RAM_MULTIPLIERS = {
    32: 2.0,   # FP32 需要更多余量
    16: 1.5,   # FP16 基准
    8: 1.2,    # INT8
    4: 1.1,    # INT4
}
DEFAULT_SYSTEM_RAM_MULTIPLIER = 1.5

# 按模型规模档位的最低系统内存 (GB)
MINIMUM_SYSTEM_RAM_GB = (8, 16, 32, 64)

GPU_OVERHEAD_RATIO = 0.10
MULTI_GPU_EFFICIENCY = 0.9
STORAGE_BASE_GB = 10


def get_system_ram_multiplier(quant_bits: int) -> float:
    return SYSTEM_RAM_MULTIPLIERS.get(quant_bits, DEFAULT_SYSTEM_RAM_MULTIPLIER)


def estimate_base_model_gb(params_billions: float, quant_bits: int) -> float:
    """模型权重在指定位宽下的存储大小"""
    return (params_billions * quant_bits * 1e9) / (8 * GB)


def estimate_hidden_size(params_billions: float) -> float:
    """由参数量近似推算隐藏维度"""
    return math.sqrt(params_billions * 1e9 / 6)


def estimate_kv_cache_gb(params_billions: float, quant_bits: int, context_tokens: int) -> float:
    """KV缓存大小：K/V 两个投影 x 2 x 上下文长度 x 位宽"""
    hidden_size = estimate_hidden_size(params_billions)
    return (2 * hidden_size * context_tokens * 2 * quant_bits / 8) / GB


class CapacityEstimator:
    """显存容量估算器"""

    def __init__(self, catalog: GpuCatalog):
        self.catalog = catalog

    def total_available_vram(self, slots: Sequence[GpuSlot]) -> float:
        """所有已选择显卡的显存总和"""
        total = 0.0
        for slot in slots:
            if slot.is_set:
                total += self.catalog.get(slot.gpu_key).vram_gb * slot.count
        return total

    def multi_gpu_efficiency(self, slots: Sequence[GpuSlot], total_available_vram_gb: float) -> float:
        """
        多卡效率系数

        可用显存总量超过第一行单块显卡的显存时视为多卡，按 0.9 折算。
        第一行未选择显卡时，其显存按 0 计。
        """
        first_slot_vram = 0.0
        if slots and slots[0].is_set:
            first_slot_vram = self.catalog.get(slots[0].gpu_key).vram_gb

        if total_available_vram_gb > first_slot_vram:
            return MULTI_GPU_EFFICIENCY
        return 1.0

    def estimate(self, request: ModelRequest) -> CapacityResult:
        """
        估算显存和系统资源需求

        Args:
            request: 已通过校验的估算请求

        Returns:
            CapacityResult

        Raises:
            UnknownGpuKeyError: 请求中包含目录外的显卡
        """
        params = request.params_billions
        quant_bits = request.quant_bits

        base_model_gb = estimate_base_model_gb(params, quant_bits)
        kv_cache_gb = estimate_kv_cache_gb(params, quant_bits, request.context_tokens)
        gpu_overhead_gb = base_model_gb * GPU_OVERHEAD_RATIO
        total_gpu_ram_gb = base_model_gb + kv_cache_gb + gpu_overhead_gb

        total_system_ram_gb = total_gpu_ram_gb * get_system_ram_multiplier(quant_bits)
        minimum_system_ram_gb = pick_by_tier(params, MINIMUM_SYSTEM_RAM_GB)

        total_available_vram_gb = self.total_available_vram(request.gpu_slots)
        efficiency = self.multi_gpu_efficiency(request.gpu_slots, total_available_vram_gb)
        effective_vram_gb = total_available_vram_gb * efficiency

        logger.debug(
            "容量估算: 权重=%.2fGB KV缓存=%.2fGB 总需求=%.2fGB 可用=%.2fGB 效率=%.1f",
            base_model_gb, kv_cache_gb, total_gpu_ram_gb, total_available_vram_gb, efficiency
        )

        return CapacityResult(
            base_model_gb=base_model_gb,
            kv_cache_gb=kv_cache_gb,
            gpu_overhead_gb=gpu_overhead_gb,
            total_gpu_ram_gb=total_gpu_ram_gb,
            total_system_ram_gb=total_system_ram_gb,
            total_available_vram_gb=total_available_vram_gb,
            effective_vram_gb=effective_vram_gb,
            multi_gpu_efficiency=efficiency,
            # 余量按原始总显存计算，不考虑多卡效率
            vram_margin_gb=total_available_vram_gb - total_gpu_ram_gb,
            minimum_system_ram_gb=minimum_system_ram_gb,
            storage_required_gb=STORAGE_BASE_GB + base_model_gb,
            recommended_cores=8 if params > 13 else 4,
            system_requirements_met=total_system_ram_gb >= minimum_system_ram_gb,
        )
