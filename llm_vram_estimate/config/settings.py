"""
全局系统设置

定义系统级配置参数和默认值，支持通过环境变量覆盖。
"""

import logging
from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


ENV_PREFIX = "LLM_VRAM_ESTIMATE_"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class Settings(BaseSettings):
    """系统设置类"""

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        extra="ignore",
    )

    # 日志配置
    log_level: str = Field(default="WARNING", description="日志级别")
    log_file: Optional[str] = Field(default=None, description="日志文件路径")

    # 输出配置
    default_output_format: str = Field(default="table", description="默认输出格式")

    # 估算默认值
    default_quant_bits: int = Field(default=16, description="默认量化位宽")
    default_context_length: int = Field(default=4096, description="默认上下文长度")

    # 显卡目录
    catalog_file: Optional[str] = Field(default=None, description="自定义显卡目录JSON文件")


class ConfigManager:
    """配置管理器"""

    def __init__(self):
        self._settings: Optional[Settings] = None

    def get_settings(self) -> Settings:
        """获取设置实例（单例模式）"""
        if self._settings is None:
            self._settings = Settings()
        return self._settings

    def update_settings(self, **kwargs) -> None:
        """更新设置"""
        settings = self.get_settings()
        for key, value in kwargs.items():
            if key not in Settings.model_fields:
                raise ValueError(f"Unknown setting: {key}")
            setattr(settings, key, value)

    def reset(self) -> None:
        """清除已加载的设置，下次访问时重新读取环境变量和 .env 文件"""
        self._settings = None


# 全局配置管理器实例
config_manager = ConfigManager()


def get_settings() -> Settings:
    """获取全局设置"""
    return config_manager.get_settings()


def configure_logging(settings: Optional[Settings] = None) -> None:
    """按设置配置根日志记录器，由命令行入口调用"""
    settings = settings or get_settings()

    handlers = [logging.StreamHandler()]
    if settings.log_file:
        handlers.append(logging.FileHandler(settings.log_file, encoding="utf-8"))

    logging.basicConfig(
        level=settings.log_level.upper(),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
