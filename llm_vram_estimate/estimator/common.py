"""
估算器共用的常量和工具函数
"""

import math
from typing import Sequence, TypeVar

T = TypeVar("T")

GB = 1024 ** 3  # 字节

# 按参数量（B）划分的模型规模档位上限，最后一档为无上限
PARAM_TIER_LIMITS = (3, 7, 13)


def param_tier(params_billions: float) -> int:
    """返回参数量所在档位：0 (<=3B), 1 (<=7B), 2 (<=13B), 3 (>13B)"""
    for tier, limit in enumerate(PARAM_TIER_LIMITS):
        if params_billions <= limit:
            return tier
    return len(PARAM_TIER_LIMITS)


def pick_by_tier(params_billions: float, values: Sequence[T]) -> T:
    """按参数量档位从四个候选值中取值"""
    return values[param_tier(params_billions)]


def round_half_up(value: float) -> int:
    """四舍五入到整数，x.5 向上取整"""
    return int(math.floor(value + 0.5))
