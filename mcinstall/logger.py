"""
日志模块

安装器是交互式的，日志同步写出，避免和 click 提示交错。
"""

import os
import sys
from typing import Optional

from loguru import logger


LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {message}"


def resolve_level(level: Optional[str] = None) -> str:
    """未指定级别时由 MCINSTALL_DEBUG 环境变量决定"""
    if level:
        return level.upper()
    return "DEBUG" if os.environ.get("MCINSTALL_DEBUG", "0") == "1" else "INFO"


def setup_logger(level: Optional[str] = None, sink=sys.stdout) -> str:
    """
    设置日志记录器

    Args:
        level: 日志级别 (DEBUG, INFO, WARNING, ERROR)
        sink: 输出目标

    Returns:
        实际使用的日志级别
    """
    level = resolve_level(level)
    debug = level == "DEBUG"

    logger.remove()
    logger.add(
        sink=sink,
        format=LOG_FORMAT,
        enqueue=False,
        level=level,
        colorize=getattr(sink, "isatty", lambda: False)(),
        backtrace=debug,
        diagnose=debug,
    )

    if debug:
        logger.debug("DEBUG 模式已启用")
    return level


__all__ = ["logger", "setup_logger", "resolve_level"]
