#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""工具类模块"""

from utils.logger import setup_logger, logger
from utils.notification import (
    send_notification,
    notification_thread,
    find_icon_path,
    create_notification_thread,
)


__all__ = [
    "send_notification",
    "notification_thread",
    "find_icon_path",
    "create_notification_thread",
    "setup_logger",
    "logger",
]
