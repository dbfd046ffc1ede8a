"""
模型预设注册表

统一管理常见开源模型的参数量预设，命令行可以直接通过模型名称估算。
"""

from dataclasses import dataclass
from typing import Dict, List


@dataclass(frozen=True)
class ModelPreset:
    """模型预设数据类"""
    name: str
    params_billions: float  # 参数量（单位：B）
    max_context_tokens: int  # 最大上下文长度
    family: str  # 模型系列


class ModelPresetRegistry:
    """模型预设注册表类"""

    def __init__(self):
        self._presets: Dict[str, ModelPreset] = {}
        self._register_built_in_presets()

    def _register_built_in_presets(self) -> None:
        """注册内置模型预设"""

        # Llama 系列
        self.register(ModelPreset("llama-2-7b", 7, 4096, "llama"))
        self.register(ModelPreset("llama-2-13b", 13, 4096, "llama"))
        self.register(ModelPreset("llama-2-70b", 70, 4096, "llama"))
        self.register(ModelPreset("llama-3.1-8b", 8, 131072, "llama"))
        self.register(ModelPreset("llama-3.1-70b", 70, 131072, "llama"))
        self.register(ModelPreset("llama-3.2-3b", 3, 131072, "llama"))

        # Qwen 系列
        self.register(ModelPreset("qwen2.5-7b", 7.6, 131072, "qwen"))
        self.register(ModelPreset("qwen2.5-14b", 14.7, 131072, "qwen"))
        self.register(ModelPreset("qwen2.5-32b", 32.5, 131072, "qwen"))
        self.register(ModelPreset("qwen3-8b", 8, 40960, "qwen"))

        # 其他
        self.register(ModelPreset("mistral-7b", 7.3, 32768, "mistral"))
        self.register(ModelPreset("gemma-2-9b", 9.2, 8192, "gemma"))
        self.register(ModelPreset("gemma-2-27b", 27.2, 8192, "gemma"))
        self.register(ModelPreset("phi-3-mini", 3.8, 4096, "phi"))

    def register(self, preset: ModelPreset) -> None:
        """
        注册模型预设

        Args:
            preset: 模型预设
        """
        self._presets[preset.name] = preset

    def get(self, model_name: str) -> ModelPreset:
        """
        获取模型预设

        Raises:
            ValueError: 未知的模型名称
        """
        if model_name not in self._presets:
            raise ValueError(f"Unsupported model: {model_name}")
        return self._presets[model_name]

    def list_presets(self) -> List[str]:
        """获取所有模型预设名称"""
        return list(self._presets.keys())

    def search(self, query: str) -> List[str]:
        """按关键词搜索模型"""
        query = query.lower()
        return [name for name in self._presets if query in name.lower()]


# 全局模型预设注册表实例
model_registry = ModelPresetRegistry()
