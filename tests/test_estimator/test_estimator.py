"""
测试兼容性估算器的完整流程
"""

import json

import pytest

from llm_vram_estimate import estimate
from llm_vram_estimate.estimator.base import CompatibilityEstimator, format_gpu_config
from llm_vram_estimate.estimator.results import (
    EstimationResult,
    ValidationError,
    ValidationErrorKind,
    Verdict,
)
from llm_vram_estimate.models.base import GpuSlot


class TestCompatibilityEstimator:
    """测试端到端估算"""

    def test_rtx4090_7b_fp16(self, estimator, make_request):
        result = estimator.estimate(make_request(7, 16, 4096, [("rtx4090", 1)]))

        assert isinstance(result, EstimationResult)
        assert result.capacity.base_model_gb == pytest.approx(13.04, abs=0.01)
        assert result.capacity.total_gpu_ram_gb == pytest.approx(15.384741, abs=1e-5)
        assert result.capacity.total_available_vram_gb == 24
        assert result.capacity.vram_margin_gb == pytest.approx(8.615259, abs=1e-5)
        assert result.advisory.verdict is Verdict.COMPATIBLE
        assert result.tokens_per_second == 98
        assert result.power.total_power_watts == 438
        assert result.gpu_config == "1x RTX 4090"

    def test_h200_70b_int4(self, estimator, make_request):
        result = estimator.estimate(make_request(70, 4, 4096, [("h200", 1)]))

        assert result.capacity.base_model_gb == pytest.approx(32.6, abs=0.01)
        assert result.advisory.verdict is Verdict.COMPATIBLE
        assert result.capacity.vram_margin_gb >= 2
        assert result.tokens_per_second == 200

    def test_insufficient_vram(self, estimator, make_request):
        result = estimator.estimate(make_request(70, 16, 4096, [("rtx4090", 1)]))
        assert result.advisory.verdict is Verdict.INSUFFICIENT
        assert not result.advisory.is_compatible
        assert result.capacity.vram_margin_gb < 0

    def test_no_gpu_selected(self, estimator, make_request):
        result = estimator.estimate(make_request(gpus=[("", 1), ("", 2)]))
        assert isinstance(result, ValidationError)
        assert result.kind is ValidationErrorKind.NO_GPU_SELECTED

    @pytest.mark.parametrize("count", [0, -1])
    def test_invalid_gpu_count(self, estimator, make_request, count):
        result = estimator.estimate(make_request(gpus=[("rtx3090", count)]))
        assert isinstance(result, ValidationError)
        assert result.kind is ValidationErrorKind.INVALID_GPU_COUNT

    @pytest.mark.parametrize("context", [0, -4096])
    def test_non_positive_context_is_rejected(self, estimator, make_request, context):
        result = estimator.estimate(make_request(context=context))
        assert isinstance(result, ValidationError)
        assert result.kind is ValidationErrorKind.INVALID_CONTEXT_LENGTH

    def test_unsupported_quantization_is_rejected(self, estimator, make_request):
        result = estimator.estimate(make_request(quant=12))
        assert isinstance(result, ValidationError)
        assert result.kind is ValidationErrorKind.UNSUPPORTED_QUANTIZATION

    def test_unknown_gpu_returned_as_value(self, estimator, make_request):
        result = estimator.estimate(make_request(gpus=[("voodoo2", 1)]))
        assert isinstance(result, ValidationError)
        assert result.kind is ValidationErrorKind.UNKNOWN_GPU_KEY

    def test_idempotent(self, estimator, make_request):
        request = make_request(13, 8, 65536, [("rtx3090", 2), ("a6000", 1)])
        assert estimator.estimate(request) == estimator.estimate(request)
        assert estimate(request) == estimate(request)

    def test_injected_catalog(self, small_catalog, make_request):
        estimator = CompatibilityEstimator(small_catalog)
        result = estimator.estimate(make_request(1, 16, 4096, [("card-a", 1), ("card-b", 1)]))

        assert result.capacity.total_available_vram_gb == 24
        assert result.gpu_config == "1x Card A + 1x Card B"

        missing = estimator.estimate(make_request(gpus=[("rtx4090", 1)]))
        assert missing.kind is ValidationErrorKind.UNKNOWN_GPU_KEY

    def test_to_dict_is_json_serializable(self, estimator, make_request):
        result = estimator.estimate(make_request(gpus=[("rtx4090", 2)]))
        data = json.loads(json.dumps(result.to_dict()))

        assert data["advisory"]["verdict"] == result.advisory.verdict.value
        assert data["power"]["per_gpu_breakdown"][0]["count"] == 2
        assert data["tokens_per_second"] == result.tokens_per_second


class TestGpuConfigLabel:
    """显卡配置描述只用于展示，是单向格式化，不需要能解析回配置"""

    def test_label(self, catalog):
        slots = [GpuSlot(gpu_key="rtx4090", count=2), GpuSlot(), GpuSlot(gpu_key="rtx3090", count=1)]
        assert format_gpu_config(slots, catalog) == "2x RTX 4090 + 1x RTX 3090"

    def test_empty_label(self, catalog):
        assert format_gpu_config([GpuSlot()], catalog) == ""
