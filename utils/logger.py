#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
日志模块
"""

import importlib.util
import logging.handlers
import os
import sys
from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {thread.name} | {name}:{line} - {message}"


def _system_log_handler(app_name):
    """
    创建系统日志处理器

    Returns:
        logging.Handler or None: 当前平台不支持时返回None
    """
    if sys.platform == "win32":
        # NTEventLogHandler 依赖 pywin32
        if importlib.util.find_spec("win32evtlog") is None:
            return None
        return logging.handlers.NTEventLogHandler(app_name)
    for address in ("/dev/log", "/var/run/syslog"):
        if os.path.exists(address):
            handler = logging.handlers.SysLogHandler(address=address)
            handler.ident = f"{app_name}: "
            return handler
    return None


def setup_logger(log_dir, retention_days=7, rotation="1 day", debug_mode=False, system_log=False, app_name="GameMon"):
    """
    配置日志系统

    Args:
        log_dir (str): 日志目录
        retention_days (int): 日志保留天数
        rotation (str): 日志轮转周期
        debug_mode (bool): 是否输出调试日志
        system_log (bool): 是否同时写入系统日志 (syslog / Windows 事件日志)
        app_name (str): 日志文件名和系统日志标识
    """
    level = "DEBUG" if debug_mode else "INFO"

    logger.remove()

    # pythonw 下没有控制台
    if sys.stderr is not None:
        logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT, colorize=True)

    os.makedirs(log_dir, exist_ok=True)
    logger.add(
        os.path.join(log_dir, f"{app_name.lower()}_{{time:YYYY-MM-DD}}.log"),
        level=level,
        format=FILE_FORMAT,
        rotation=rotation,
        retention=f"{retention_days} days",
        encoding="utf-8",
        enqueue=True,
    )

    if system_log:
        handler = _system_log_handler(app_name)
        if handler is not None:
            logger.add(handler, level="INFO", format="{message}")
        else:
            logger.warning("System log is not available on this platform")

    logger.debug(f"日志系统已初始化，日志目录: {log_dir}")


__all__ = ["logger", "setup_logger"]
