"""
日志模块

基于 loguru。日志统一写到 stderr，标准输出只留给命令结果（JSON）。
"""

import os
import sys
from typing import Mapping, Optional

from loguru import logger

DEBUG_ENV = "ECHOREGISTRY_DEBUG"

_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | <level>{level: <8}</level> | {message}"
_DEBUG_FORMAT = (
    "{time:HH:mm:ss.SSS} | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> | {message}"
)


def resolve_level(
    level: Optional[str] = None, environ: Optional[Mapping[str, str]] = None
) -> str:
    """显式指定的级别优先，否则由 ECHOREGISTRY_DEBUG 决定 DEBUG / INFO"""
    if level:
        return level.upper()
    environ = os.environ if environ is None else environ
    return "DEBUG" if environ.get(DEBUG_ENV, "0") == "1" else "INFO"


def setup_logger(
    level: Optional[str] = None,
    sink=None,
    colorize: Optional[bool] = None,
    serialize: bool = False,
) -> str:
    """
    设置日志记录器

    Args:
        level: 日志级别 (DEBUG, INFO, WARNING, ERROR)
        sink: 输出目标，默认为调用时的 sys.stderr
        colorize: 是否启用颜色，None 表示按终端自动判断
        serialize: 以 JSON 行输出日志

    Returns:
        实际使用的日志级别
    """
    level = resolve_level(level)
    debug = level == "DEBUG"

    logger.remove()
    logger.add(
        sink or sys.stderr,
        format=_DEBUG_FORMAT if debug else _FORMAT,
        level=level,
        colorize=colorize,
        serialize=serialize,
        backtrace=debug,
        diagnose=debug,
    )

    if debug:
        logger.debug("DEBUG 模式已启用")
    return level


__all__ = ["logger", "setup_logger", "resolve_level"]
