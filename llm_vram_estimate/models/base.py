"""
估算请求定义

由调用方（CLI或界面层）根据表单状态构造，估算器不会修改请求。
"""

from typing import List, Optional
from pydantic import BaseModel as PydanticModel, Field


# 支持的量化位宽
SUPPORTED_QUANT_BITS = (4, 8, 16, 32)


class GpuSlot(PydanticModel):
    """显卡配置中的一行：显卡型号 + 数量"""
    gpu_key: Optional[str] = Field(default=None, description="显卡标识，为空表示未选择")
    count: int = Field(default=1, description="显卡数量")

    @property
    def is_set(self) -> bool:
        """是否已选择显卡"""
        return bool(self.gpu_key)


class ModelRequest(PydanticModel):
    """模型估算请求"""
    params_billions: float = Field(description="模型参数量（单位：B）")
    quant_bits: int = Field(default=16, description="量化位宽 (4/8/16/32)")
    context_tokens: int = Field(default=4096, description="上下文长度")
    gpu_slots: List[GpuSlot] = Field(default_factory=list, description="显卡配置列表")

    def selected_slots(self) -> List[GpuSlot]:
        """返回已选择显卡的配置行（保持原有顺序）"""
        return [slot for slot in self.gpu_slots if slot.is_set]
