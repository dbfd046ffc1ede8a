"""
硬件管理模块

提供显卡规格定义和可注入的显卡目录（GPU Catalog）。
"""

from .base import GpuSpec, UnknownGpuKeyError
from .catalog import (
    GpuCatalog,
    default_catalog,
    GPU_SPECS,
    GENERATION_ORDER,
)

__all__ = [
    # 基础类
    "GpuSpec",
    "UnknownGpuKeyError",

    # 显卡目录
    "GpuCatalog",
    "default_catalog",
    "GPU_SPECS",
    "GENERATION_ORDER",
]
