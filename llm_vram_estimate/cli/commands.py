"""
CLI命令实现

提供命令行界面的具体命令实现。
"""

import logging
from typing import Optional, Tuple, List

import click
from tabulate import tabulate

from ..config.settings import get_settings, configure_logging, config_manager
from ..estimator.base import CompatibilityEstimator
from ..estimator.results import ValidationError
from ..hardware.catalog import GpuCatalog, default_catalog
from ..models.base import GpuSlot, ModelRequest, SUPPORTED_QUANT_BITS
from ..models.registry import model_registry
from ..utils.formatters import format_results, format_sweep_results

logger = logging.getLogger(__name__)

DEFAULT_SWEEP_CONTEXTS = "4096,8192,16384,32768,65536,131072"
QUANT_CHOICES = [str(bits) for bits in SUPPORTED_QUANT_BITS]


@click.group()
@click.version_option(version="0.1.0", prog_name="llm-vram-estimate")
@click.option("--verbose", "-v", is_flag=True, help="输出调试日志")
def cli(verbose: bool):
    """LLM显卡兼容性估算工具

    估算大语言模型在指定显卡配置下能否运行，
    以及所需的系统内存、推理吞吐量和整机功耗。
    """
    if verbose:
        config_manager.update_settings(log_level="DEBUG")
    configure_logging(get_settings())


def parse_gpu_slot(value: str) -> GpuSlot:
    """
    解析显卡参数

    格式为 KEY 或 KEY:COUNT，如 rtx4090:2
    """
    key, sep, count = value.partition(":")
    key = key.strip().lower()
    if not sep:
        return GpuSlot(gpu_key=key, count=1)

    try:
        return GpuSlot(gpu_key=key, count=int(count))
    except ValueError:
        raise click.BadParameter(f"显卡数量必须是整数: {value}", param_hint="--gpu")


def load_catalog(catalog_file: Optional[str]) -> GpuCatalog:
    """加载显卡目录，未指定文件时使用内置目录"""
    catalog_file = catalog_file or get_settings().catalog_file
    if not catalog_file:
        return default_catalog()

    try:
        return GpuCatalog.from_json(catalog_file)
    except (OSError, ValueError) as e:
        raise click.ClickException(f"无法加载显卡目录 {catalog_file}: {e}")


def build_request(params: Optional[float], model: Optional[str], quant: Optional[str],
                  context: Optional[int], gpus: Tuple[str, ...]) -> ModelRequest:
    """根据命令行参数构建估算请求"""
    settings = get_settings()

    if model:
        try:
            preset = model_registry.get(model)
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint="--model")
        if params is None:
            params = preset.params_billions
    elif params is None:
        raise click.UsageError("必须指定 --params 或 --model 参数")

    return ModelRequest(
        params_billions=params,
        quant_bits=int(quant) if quant else settings.default_quant_bits,
        context_tokens=context if context is not None else settings.default_context_length,
        gpu_slots=[parse_gpu_slot(gpu) for gpu in gpus],
    )


def run_estimate(estimator: CompatibilityEstimator, request: ModelRequest):
    """执行估算，校验失败时转换为命令行错误"""
    result = estimator.estimate(request)
    if isinstance(result, ValidationError):
        raise click.ClickException(f"{result.message} ({result.kind.value})")

    logger.info("完成估算: %.1fB, %d-bit, %d tokens, %s",
                request.params_billions, request.quant_bits,
                request.context_tokens, result.gpu_config)
    return result


def write_output(content: str, output_file: Optional[str]) -> None:
    if output_file:
        with open(output_file, "w", encoding="utf-8") as f:
            f.write(content)
        click.echo(f"结果已保存到: {output_file}")
    else:
        click.echo(content)


@cli.command()
@click.option("--params", "-p", type=float, help="模型参数量（单位：B），如 7")
@click.option("--model", "-m", help="模型预设名称（见 list-models）")
@click.option("--quant", "-q", type=click.Choice(QUANT_CHOICES), help="量化位宽")
@click.option("--context", "-c", type=int, help="上下文长度 (tokens)")
@click.option("--gpu", "-g", "gpus", multiple=True, help="显卡配置 KEY[:COUNT]，可重复指定")
@click.option("--catalog", type=click.Path(exists=True, dir_okay=False), help="自定义显卡目录JSON文件")
@click.option("--output-file", type=click.Path(), help="输出文件路径")
@click.option("--format", "-f", "output_format", type=click.Choice(["table", "json", "csv"]),
              help="输出格式")
def estimate(params: Optional[float], model: Optional[str], quant: Optional[str],
             context: Optional[int], gpus: Tuple[str, ...], catalog: Optional[str],
             output_file: Optional[str], output_format: Optional[str]):
    """估算模型在指定显卡配置下的兼容性

    示例: llm-vram-estimate estimate -p 7 -q 16 -g rtx4090 -g rtx3090:2
    """
    request = build_request(params, model, quant, context, gpus)
    estimator = CompatibilityEstimator(load_catalog(catalog))
    result = run_estimate(estimator, request)

    output_format = output_format or get_settings().default_output_format
    write_output(format_results(result, output_format), output_file)


@cli.command()
@click.option("--params", "-p", type=float, help="模型参数量（单位：B）")
@click.option("--model", "-m", help="模型预设名称")
@click.option("--quant", "-q", type=click.Choice(QUANT_CHOICES), help="量化位宽")
@click.option("--contexts", default=DEFAULT_SWEEP_CONTEXTS, help="上下文长度列表，逗号分隔")
@click.option("--gpu", "-g", "gpus", multiple=True, help="显卡配置 KEY[:COUNT]，可重复指定")
@click.option("--catalog", type=click.Path(exists=True, dir_okay=False), help="自定义显卡目录JSON文件")
@click.option("--output-file", type=click.Path(), help="输出文件路径")
@click.option("--format", "-f", "output_format", default="table",
              type=click.Choice(["table", "json", "csv"]), help="输出格式")
def sweep(params: Optional[float], model: Optional[str], quant: Optional[str], contexts: str,
          gpus: Tuple[str, ...], catalog: Optional[str], output_file: Optional[str],
          output_format: str):
    """估算不同上下文长度下的显存需求和兼容性"""
    try:
        context_list = [int(x.strip()) for x in contexts.split(",") if x.strip()]
    except ValueError:
        raise click.BadParameter(f"上下文长度必须是整数: {contexts}", param_hint="--contexts")

    estimator = CompatibilityEstimator(load_catalog(catalog))

    rows: List[dict] = []
    for context in context_list:
        request = build_request(params, model, quant, context, gpus)
        rows.append({"context_tokens": context, "result": run_estimate(estimator, request)})

    write_output(format_sweep_results(rows, output_format), output_file)


@cli.command()
@click.option("--generation", "-g", help="按架构筛选 (如 Ampere、Hopper)")
@click.option("--catalog", type=click.Path(exists=True, dir_okay=False), help="自定义显卡目录JSON文件")
def list_gpus(generation: Optional[str], catalog: Optional[str]):
    """列出支持的显卡"""
    gpu_catalog = load_catalog(catalog)

    specs = gpu_catalog.sorted_for_display()
    if generation:
        wanted = {spec.key for spec in gpu_catalog.by_generation(generation)}
        specs = [spec for spec in specs if spec.key in wanted]
        if not specs:
            click.echo(f"没有 {generation} 架构的显卡")
            return

    data = [
        [spec.key, spec.name, f"{spec.vram_gb:g} GB", spec.generation,
         f"{spec.tflops:g}", f"{spec.tdp_watts:g}W"]
        for spec in specs
    ]
    headers = ["标识", "型号", "显存", "架构", "FP16 TFLOPS", "TDP"]
    click.echo(tabulate(data, headers=headers, tablefmt="grid"))


@cli.command()
def list_models():
    """列出支持的模型预设"""
    data = []
    for name in model_registry.list_presets():
        preset = model_registry.get(name)
        data.append([name, f"{preset.params_billions:g}B", preset.family,
                     preset.max_context_tokens])

    headers = ["模型名称", "参数量", "系列", "最大长度"]
    click.echo(tabulate(data, headers=headers, tablefmt="grid"))


def main():
    """主程序入口"""
    cli()


if __name__ == "__main__":
    main()
