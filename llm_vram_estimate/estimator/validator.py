"""
请求校验器

在估算之前检查请求，按规则顺序返回第一个违反的规则。
"""

import math
from typing import Optional

from ..hardware.catalog import GpuCatalog
from ..models.base import ModelRequest, SUPPORTED_QUANT_BITS
from .results import ValidationError, ValidationErrorKind


def _is_positive_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def validate_request(request: ModelRequest,
                     catalog: Optional[GpuCatalog] = None) -> Optional[ValidationError]:
    """
    校验估算请求

    规则依次为：参数量为有限正数；至少选择一块显卡；
    已选择显卡的数量为正整数；已选择的显卡存在于目录中（仅在传入目录时检查）；
    上下文长度为正整数；量化位宽为 4/8/16/32 之一。

    Args:
        request: 估算请求
        catalog: 显卡目录

    Returns:
        校验通过返回 None，否则返回第一个违反规则对应的 ValidationError
    """
    params = request.params_billions
    if params is None or not math.isfinite(params) or params <= 0:
        return ValidationError(
            kind=ValidationErrorKind.INVALID_PARAMETER_COUNT,
            message="请输入大于0的有效参数量",
        )

    if not request.selected_slots():
        return ValidationError(
            kind=ValidationErrorKind.NO_GPU_SELECTED,
            message="请至少选择一种显卡型号",
        )

    for index, slot in enumerate(request.gpu_slots):
        if slot.is_set and not _is_positive_int(slot.count):
            return ValidationError(
                kind=ValidationErrorKind.INVALID_GPU_COUNT,
                message=f"第{index + 1}行显卡数量无效: {slot.count}",
                slot_index=index,
            )

    if catalog is not None:
        for index, slot in enumerate(request.gpu_slots):
            if slot.is_set and slot.gpu_key not in catalog:
                return ValidationError(
                    kind=ValidationErrorKind.UNKNOWN_GPU_KEY,
                    message=f"不支持的显卡型号: {slot.gpu_key}",
                    slot_index=index,
                )

    if not _is_positive_int(request.context_tokens):
        return ValidationError(
            kind=ValidationErrorKind.INVALID_CONTEXT_LENGTH,
            message=f"上下文长度必须为正整数: {request.context_tokens}",
        )

    if request.quant_bits not in SUPPORTED_QUANT_BITS:
        return ValidationError(
            kind=ValidationErrorKind.UNSUPPORTED_QUANTIZATION,
            message=f"不支持的量化位宽: {request.quant_bits}",
        )

    return None
