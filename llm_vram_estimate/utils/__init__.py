"""
工具模块
"""

from .formatters import format_results, format_sweep_results, compatibility_message

__all__ = ["format_results", "format_sweep_results", "compatibility_message"]
