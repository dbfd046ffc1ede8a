"""
测试显存容量估算
"""

import pytest

from llm_vram_estimate.estimator.capacity import (
    CapacityEstimator,
    estimate_base_model_gb,
    estimate_kv_cache_gb,
    get_system_ram_multiplier,
)
from llm_vram_estimate.hardware.base import UnknownGpuKeyError


@pytest.fixture
def capacity_estimator(catalog):
    return CapacityEstimator(catalog)


class TestMemoryFormulas:
    """测试显存计算公式"""

    def test_base_model_size(self):
        # 7B @ FP16 = 14e9 bytes
        assert estimate_base_model_gb(7, 16) == pytest.approx(14e9 / 1024 ** 3)
        assert estimate_base_model_gb(70, 4) == pytest.approx(32.596290, abs=1e-5)

    def test_kv_cache_scales_linearly_with_context(self):
        kv_4k = estimate_kv_cache_gb(7, 16, 4096)
        kv_8k = estimate_kv_cache_gb(7, 16, 8192)
        assert kv_8k == pytest.approx(kv_4k * 2)

    @pytest.mark.parametrize("bits, multiplier", [(32, 2.0), (16, 1.5), (8, 1.2), (4, 1.1), (6, 1.5)])
    def test_system_ram_multiplier(self, bits, multiplier):
        assert get_system_ram_multiplier(bits) == multiplier


class TestCapacityEstimator:
    """测试容量估算结果"""

    def test_single_rtx4090_7b_fp16(self, capacity_estimator, make_request):
        result = capacity_estimator.estimate(make_request(7, 16, 4096, [("rtx4090", 1)]))

        assert result.base_model_gb == pytest.approx(13.038516, abs=1e-5)
        assert result.kv_cache_gb == pytest.approx(1.042374, abs=1e-5)
        assert result.gpu_overhead_gb == pytest.approx(1.303852, abs=1e-5)
        assert result.total_gpu_ram_gb == pytest.approx(15.384741, abs=1e-5)
        assert result.total_system_ram_gb == pytest.approx(23.077112, abs=1e-5)
        assert result.total_available_vram_gb == 24
        assert result.multi_gpu_efficiency == 1.0
        assert result.effective_vram_gb == 24
        assert result.vram_margin_gb == pytest.approx(8.615259, abs=1e-5)
        assert result.minimum_system_ram_gb == 16
        assert result.storage_required_gb == pytest.approx(23.038516, abs=1e-5)
        assert result.recommended_cores == 4
        assert result.system_requirements_met is True

    def test_single_h200_70b_int4(self, capacity_estimator, make_request):
        result = capacity_estimator.estimate(make_request(70, 4, 4096, [("h200", 1)]))

        assert result.base_model_gb == pytest.approx(32.596290, abs=1e-5)
        assert result.kv_cache_gb == pytest.approx(0.824069, abs=1e-5)
        assert result.total_gpu_ram_gb == pytest.approx(36.679988, abs=1e-5)
        assert result.total_system_ram_gb == pytest.approx(40.347987, abs=1e-5)
        assert result.total_available_vram_gb == 141
        assert result.vram_margin_gb == pytest.approx(104.320012, abs=1e-5)
        assert result.minimum_system_ram_gb == 64
        assert result.recommended_cores == 8
        assert result.system_requirements_met is False

    def test_two_slots_apply_multi_gpu_efficiency(self, capacity_estimator, make_request):
        result = capacity_estimator.estimate(
            make_request(13, 8, 8192, [("rtx3090", 1), ("rtx3090", 1)])
        )

        assert result.total_available_vram_gb == 48
        assert result.multi_gpu_efficiency == 0.9
        assert result.effective_vram_gb == pytest.approx(43.2)
        # 余量使用原始总显存
        assert result.vram_margin_gb == pytest.approx(48 - result.total_gpu_ram_gb)
        assert result.total_gpu_ram_gb == pytest.approx(14.738429, abs=1e-5)

    def test_single_slot_with_multiple_units_exceeds_first_gpu(self, capacity_estimator, make_request):
        # 第一行按单卡显存比较，count=2 时总显存大于单卡
        result = capacity_estimator.estimate(make_request(gpus=[("rtx4090", 2)]))
        assert result.total_available_vram_gb == 48
        assert result.multi_gpu_efficiency == 0.9

    def test_unset_first_slot_counts_as_zero(self, capacity_estimator, make_request):
        result = capacity_estimator.estimate(make_request(gpus=[("", 1), ("rtx4090", 1)]))
        assert result.total_available_vram_gb == 24
        assert result.multi_gpu_efficiency == 0.9
        assert result.effective_vram_gb == pytest.approx(21.6)

    def test_unset_slots_contribute_nothing(self, capacity_estimator, make_request):
        with_blank = capacity_estimator.estimate(make_request(gpus=[("rtx4090", 1), ("", 4)]))
        without = capacity_estimator.estimate(make_request(gpus=[("rtx4090", 1)]))
        assert with_blank == without

    @pytest.mark.parametrize("params, minimum", [(1, 8), (3, 8), (3.5, 16), (7, 16), (13, 32), (13.1, 64)])
    def test_minimum_system_ram_tiers(self, capacity_estimator, make_request, params, minimum):
        result = capacity_estimator.estimate(make_request(params=params))
        assert result.minimum_system_ram_gb == minimum

    def test_context_monotonicity(self, capacity_estimator, make_request):
        results = [
            capacity_estimator.estimate(make_request(context=context))
            for context in (1024, 4096, 32768, 131072)
        ]
        for previous, current in zip(results, results[1:]):
            assert current.kv_cache_gb >= previous.kv_cache_gb
            assert current.total_gpu_ram_gb >= previous.total_gpu_ram_gb

    def test_effective_never_exceeds_available(self, capacity_estimator, make_request):
        configs = [
            [("rtx4090", 1)],
            [("rtx4090", 4)],
            [("a100-80gb", 2), ("rtx3090", 1)],
            [("", 1), ("m1", 1)],
        ]
        for gpus in configs:
            result = capacity_estimator.estimate(make_request(gpus=gpus))
            assert result.effective_vram_gb <= result.total_available_vram_gb

    def test_unknown_gpu_fails_fast(self, capacity_estimator, make_request):
        with pytest.raises(UnknownGpuKeyError):
            capacity_estimator.estimate(make_request(gpus=[("voodoo2", 1)]))
