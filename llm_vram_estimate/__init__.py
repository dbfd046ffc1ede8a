"""
LLM-VRAM-Estimate: 大语言模型显卡兼容性估算工具

根据模型参数量、量化精度和上下文长度，估算一组显卡能否容纳该模型，
以及所需的系统内存、推理吞吐量和整机功耗。
"""

__version__ = "0.1.0"

from .estimator.base import CompatibilityEstimator, estimate
from .estimator.validator import validate_request
from .hardware.base import GpuSpec, UnknownGpuKeyError
from .hardware.catalog import GpuCatalog, default_catalog
from .models.base import ModelRequest, GpuSlot
from .models.registry import ModelPresetRegistry
from .estimator.results import (
    CapacityResult,
    PowerResult,
    AdvisoryResult,
    EstimationResult,
    ValidationError,
    ValidationErrorKind,
    Verdict,
)

__all__ = [
    "CompatibilityEstimator",
    "estimate",
    "validate_request",
    "GpuSpec",
    "UnknownGpuKeyError",
    "GpuCatalog",
    "default_catalog",
    "ModelRequest",
    "GpuSlot",
    "ModelPresetRegistry",
    "CapacityResult",
    "PowerResult",
    "AdvisoryResult",
    "EstimationResult",
    "ValidationError",
    "ValidationErrorKind",
    "Verdict",
]
