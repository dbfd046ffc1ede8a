"""
显卡目录

以数据表的形式维护显卡规格，估算器通过注入的 GpuCatalog 查询显卡，
不在估算逻辑中硬编码任何型号。
"""

import json
import logging
from pathlib import Path
from typing import Dict, Any, Iterable, List, Mapping, Optional, Sequence, Union

from .base import GpuSpec, UnknownGpuKeyError

logger = logging.getLogger(__name__)


# 架构代际，按发布时间从旧到新排列
GENERATION_ORDER = (
    "Pascal",
    "Volta",
    "Ampere",
    "Ada Lovelace",
    "Hopper",
    "RDNA3",
    "Apple Silicon",
)

# 需要提示系统/驱动支持情况的显卡标识前缀（AMD Radeon 依赖 ROCm）
DRIVER_CAVEAT_PREFIXES = ("rx",)


def _spec(key: str, name: str, vram_gb: float, generation: str,
          tflops: float, tdp_watts: float) -> GpuSpec:
    return GpuSpec(key=key, name=name, vram_gb=vram_gb, generation=generation,
                   tflops=tflops, tdp_watts=tdp_watts)


# 预定义的显卡规格（算力为 FP16/混合精度 TFLOPS）
GPU_SPECS: Dict[str, GpuSpec] = {
    # NVIDIA 数据中心系列
    "h200": _spec("h200", "H200", 141, "Hopper", 1979, 700),
    "h100": _spec("h100", "H100", 80, "Hopper", 1979, 700),
    "a100-80gb": _spec("a100-80gb", "A100 80GB", 80, "Ampere", 312, 400),
    "a100-40gb": _spec("a100-40gb", "A100 40GB", 40, "Ampere", 312, 400),
    "a40": _spec("a40", "A40", 48, "Ampere", 149.8, 300),
    "v100-32gb": _spec("v100-32gb", "V100 32GB", 32, "Volta", 125, 300),
    "v100-16gb": _spec("v100-16gb", "V100 16GB", 16, "Volta", 125, 300),

    # NVIDIA 工作站系列
    "a6000": _spec("a6000", "A6000", 48, "Ampere", 38.7, 300),
    "a5000": _spec("a5000", "A5000", 24, "Ampere", 27.8, 230),
    "a4000": _spec("a4000", "A4000", 16, "Ampere", 19.2, 140),
    "teslap40": _spec("teslap40", "Tesla P40", 24, "Pascal", 12, 250),
    "teslap100": _spec("teslap100", "Tesla P100", 16, "Pascal", 9.3, 250),

    # NVIDIA 消费级系列
    "rtx4090": _spec("rtx4090", "RTX 4090", 24, "Ada Lovelace", 82.6, 450),
    "rtx4080": _spec("rtx4080", "RTX 4080", 16, "Ada Lovelace", 65, 320),
    "rtx4060ti": _spec("rtx4060ti", "RTX 4060 Ti", 8, "Ada Lovelace", 22.1, 160),
    "rtx3090ti": _spec("rtx3090ti", "RTX 3090 Ti", 24, "Ampere", 40, 450),
    "rtx3090": _spec("rtx3090", "RTX 3090", 24, "Ampere", 35.6, 350),
    "rtx3080ti": _spec("rtx3080ti", "RTX 3080 Ti", 12, "Ampere", 34.1, 350),
    "rtx3080": _spec("rtx3080", "RTX 3080", 10, "Ampere", 29.8, 320),
    "gtx1080ti": _spec("gtx1080ti", "GTX 1080 Ti", 11, "Pascal", 11.3, 250),
    "gtx1070ti": _spec("gtx1070ti", "GTX 1070 Ti", 8, "Pascal", 8.1, 180),
    "gtx1070": _spec("gtx1070", "GTX 1070", 8, "Pascal", 6.5, 150),
    "gtx1060": _spec("gtx1060", "GTX 1060", 6, "Pascal", 4.4, 120),

    # Apple Silicon（统一内存，按 GPU 可用部分估计）
    "m4": _spec("m4", "Apple M4", 16, "Apple Silicon", 4.6, 22),
    "m3": _spec("m3", "Apple M3", 8, "Apple Silicon", 4.1, 20),
    "m2": _spec("m2", "Apple M2", 8, "Apple Silicon", 3.6, 20),
    "m1": _spec("m1", "Apple M1", 8, "Apple Silicon", 2.6, 15),

    # AMD Radeon 系列
    "rx7900xtx": _spec("rx7900xtx", "Radeon RX 7900 XTX", 24, "RDNA3", 61, 355),
    "rx7900xt": _spec("rx7900xt", "Radeon RX 7900 XT", 20, "RDNA3", 52, 315),
    "rx7900gre": _spec("rx7900gre", "Radeon RX 7900 GRE", 16, "RDNA3", 46, 260),
    "rx7800xt": _spec("rx7800xt", "Radeon RX 7800 XT", 16, "RDNA3", 37, 263),
    "rx7700xt": _spec("rx7700xt", "Radeon RX 7700 XT", 12, "RDNA3", 35, 245),
}


class GpuCatalog:
    """显卡目录类

    初始化后不再修改，估算过程中只做查询。
    """

    def __init__(self, specs: Mapping[str, GpuSpec],
                 generation_order: Sequence[str] = GENERATION_ORDER,
                 driver_caveat_prefixes: Iterable[str] = DRIVER_CAVEAT_PREFIXES):
        """
        初始化显卡目录

        Args:
            specs: 显卡标识到规格的映射
            generation_order: 架构代际列表，从旧到新
            driver_caveat_prefixes: 需要驱动支持提示的显卡标识前缀

        Raises:
            ValueError: 规格数值非法或标识与规格不一致
        """
        if not specs:
            raise ValueError("显卡目录不能为空")

        for key, spec in specs.items():
            if key != spec.key:
                raise ValueError(f"显卡标识不一致: {key} != {spec.key}")
            spec.validate()

        self._specs: Dict[str, GpuSpec] = dict(specs)
        self.generation_order = tuple(generation_order)
        self.driver_caveat_prefixes = tuple(p.lower() for p in driver_caveat_prefixes)

    def get(self, gpu_key: str) -> GpuSpec:
        """
        查询显卡规格

        Raises:
            UnknownGpuKeyError: 目录中不存在该显卡
        """
        try:
            return self._specs[gpu_key]
        except KeyError:
            raise UnknownGpuKeyError(gpu_key) from None

    def __contains__(self, gpu_key: object) -> bool:
        return gpu_key in self._specs

    def __len__(self) -> int:
        return len(self._specs)

    def keys(self) -> List[str]:
        return list(self._specs.keys())

    def list_specs(self) -> List[GpuSpec]:
        return list(self._specs.values())

    def by_generation(self, generation: str) -> List[GpuSpec]:
        """按架构代际筛选显卡（不区分大小写）"""
        generation = generation.lower()
        return [spec for spec in self._specs.values()
                if spec.generation.lower() == generation]

    def sorted_for_display(self) -> List[GpuSpec]:
        """按名称前缀排序，前缀相同时按显存从小到大"""
        return sorted(
            self._specs.values(),
            key=lambda spec: (spec.name.split(" ")[0], spec.vram_gb)
        )

    @property
    def oldest_generation(self) -> Optional[str]:
        """目录中最旧的受支持架构"""
        present = {spec.generation for spec in self._specs.values()}
        for generation in self.generation_order:
            if generation in present:
                return generation
        return None

    def requires_driver_caveat(self, gpu_key: str) -> bool:
        """显卡是否属于需要提示驱动支持情况的厂商系列"""
        return gpu_key.lower().startswith(self.driver_caveat_prefixes)

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        return {key: spec.to_dict() for key, spec in self._specs.items()}

    @classmethod
    def from_dict(cls, data: Mapping[str, Mapping[str, Any]], **kwargs) -> "GpuCatalog":
        """
        从字典创建显卡目录

        Args:
            data: {"rtx4090": {"name": ..., "vram_gb": ..., ...}, ...}
        """
        specs = {}
        for key, entry in data.items():
            try:
                specs[key] = GpuSpec(
                    key=key,
                    name=str(entry["name"]),
                    vram_gb=float(entry["vram_gb"]),
                    generation=str(entry["generation"]),
                    tflops=float(entry["tflops"]),
                    tdp_watts=float(entry["tdp_watts"]),
                )
            except KeyError as e:
                raise ValueError(f"显卡 {key} 缺少字段: {e.args[0]}") from e
        return cls(specs, **kwargs)

    @classmethod
    def from_json(cls, path: Union[str, Path], **kwargs) -> "GpuCatalog":
        """从 JSON 文件加载显卡目录"""
        path = Path(path)
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)

        catalog = cls.from_dict(data, **kwargs)
        logger.debug("从 %s 加载了 %d 个显卡规格", path, len(catalog))
        return catalog


_default_catalog: Optional[GpuCatalog] = None


def default_catalog() -> GpuCatalog:
    """获取内置显卡目录"""
    global _default_catalog
    if _default_catalog is None:
        _default_catalog = GpuCatalog(GPU_SPECS)
    return _default_catalog
