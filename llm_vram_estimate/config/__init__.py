"""
全局配置模块

管理系统级的全局配置和日志设置。
"""

from .settings import Settings, get_settings, configure_logging

__all__ = ["Settings", "get_settings", "configure_logging"]
