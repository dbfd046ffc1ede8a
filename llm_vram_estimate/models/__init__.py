"""
模型管理模块

定义估算请求结构，并提供常见开源模型的参数量预设。
"""

from .base import ModelRequest, GpuSlot, SUPPORTED_QUANT_BITS
from .registry import ModelPreset, ModelPresetRegistry, model_registry

__all__ = [
    "ModelRequest",
    "GpuSlot",
    "SUPPORTED_QUANT_BITS",
    "ModelPreset",
    "ModelPresetRegistry",
    "model_registry",
]
