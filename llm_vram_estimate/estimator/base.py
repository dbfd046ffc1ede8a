"""
兼容性估算器主类

组合请求校验、容量、吞吐量、功耗估算和提示生成，
每次调用都是独立的纯计算，不保留任何调用之间的状态。
"""

import logging
from typing import Optional, Sequence, Union

from ..hardware.base import UnknownGpuKeyError
from ..hardware.catalog import GpuCatalog, default_catalog
from ..models.base import GpuSlot, ModelRequest
from .advisory import AdvisoryEngine
from .capacity import CapacityEstimator
from .power import PowerEstimator
from .results import EstimationResult, ValidationError, ValidationErrorKind
from .throughput import ThroughputEstimator
from .validator import validate_request

logger = logging.getLogger(__name__)


def format_gpu_config(slots: Sequence[GpuSlot], catalog: GpuCatalog) -> str:
    """
    生成显卡配置描述，如 "2x RTX 4090 + 1x RTX 3090"

    仅用于展示，不保证能被解析回配置。
    """
    return " + ".join(
        f"{slot.count}x {catalog.get(slot.gpu_key).name}"
        for slot in slots if slot.is_set
    )


class CompatibilityEstimator:
    """兼容性估算器"""

    def __init__(self, catalog: Optional[GpuCatalog] = None):
        self.catalog = catalog or default_catalog()
        self.capacity_estimator = CapacityEstimator(self.catalog)
        self.throughput_estimator = ThroughputEstimator(self.catalog)
        self.power_estimator = PowerEstimator(self.catalog)
        self.advisory_engine = AdvisoryEngine(self.catalog)

    def validate(self, request: ModelRequest) -> Optional[ValidationError]:
        return validate_request(request, self.catalog)

    def estimate(self, request: ModelRequest) -> Union[EstimationResult, ValidationError]:
        """
        执行完整的兼容性估算

        Args:
            request: 估算请求

        Returns:
            校验通过时返回 EstimationResult，否则返回 ValidationError
        """
        error = self.validate(request)
        if error is not None:
            logger.info("估算请求未通过校验: %s (%s)", error.kind.value, error.message)
            return error

        try:
            capacity = self.capacity_estimator.estimate(request)
            tokens_per_second = self.throughput_estimator.estimate(request)
            power = self.power_estimator.estimate(request)
            advisory = self.advisory_engine.evaluate(request, capacity)
            gpu_config = format_gpu_config(request.gpu_slots, self.catalog)
        except UnknownGpuKeyError as e:
            return ValidationError(
                kind=ValidationErrorKind.UNKNOWN_GPU_KEY,
                message=str(e),
            )

        logger.debug("估算完成: %s -> %s, %d tokens/s",
                     gpu_config, advisory.verdict.value, tokens_per_second)

        return EstimationResult(
            capacity=capacity,
            tokens_per_second=tokens_per_second,
            power=power,
            advisory=advisory,
            gpu_config=gpu_config,
        )


def estimate(request: ModelRequest,
             catalog: Optional[GpuCatalog] = None) -> Union[EstimationResult, ValidationError]:
    """使用指定（或内置）显卡目录执行一次估算"""
    return CompatibilityEstimator(catalog).estimate(request)
