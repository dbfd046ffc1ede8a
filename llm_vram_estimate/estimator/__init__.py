"""
估算引擎模块

提供显存容量、吞吐量、功耗估算以及兼容性判断，全部为无副作用的纯计算。
"""

from .base import CompatibilityEstimator, estimate, format_gpu_config
from .validator import validate_request
from .capacity import CapacityEstimator
from .throughput import ThroughputEstimator
from .power import PowerEstimator
from .advisory import AdvisoryEngine, determine_verdict

__all__ = [
    "CompatibilityEstimator",
    "estimate",
    "format_gpu_config",
    "validate_request",
    "CapacityEstimator",
    "ThroughputEstimator",
    "PowerEstimator",
    "AdvisoryEngine",
    "determine_verdict",
]
