"""
pytest配置文件

定义测试的全局配置和fixture。
"""

import pytest

from llm_vram_estimate.config.settings import config_manager
from llm_vram_estimate.estimator.base import CompatibilityEstimator
from llm_vram_estimate.hardware.base import GpuSpec
from llm_vram_estimate.hardware.catalog import GpuCatalog, default_catalog
from llm_vram_estimate.models.base import GpuSlot, ModelRequest


@pytest.fixture
def catalog():
    """内置显卡目录"""
    return default_catalog()


@pytest.fixture
def small_catalog():
    """只包含少量显卡的自定义目录"""
    return GpuCatalog({
        "card-a": GpuSpec("card-a", "Card A", 16, "Ampere", 30, 300),
        "card-b": GpuSpec("card-b", "Card B", 8, "Pascal", 10, 200),
    })


@pytest.fixture
def estimator(catalog):
    return CompatibilityEstimator(catalog)


@pytest.fixture
def make_request():
    """构造估算请求，gpus 为 (显卡标识, 数量) 列表"""
    def _make(params=7, quant=16, context=4096, gpus=(("rtx4090", 1),)):
        return ModelRequest(
            params_billions=params,
            quant_bits=quant,
            context_tokens=context,
            gpu_slots=[GpuSlot(gpu_key=key, count=count) for key, count in gpus],
        )
    return _make


@pytest.fixture(autouse=True)
def reset_settings():
    """每个测试结束后清除全局设置"""
    yield
    config_manager.reset()
