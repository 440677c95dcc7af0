#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
通知系统模块
"""

import os
import sys
import queue
import threading
import time
from plyer import notification
from utils.logger import logger


def send_notification(title, message, icon_path=None, app_name="GameMon", timeout=5):
    """
    发送桌面通知

    Args:
        title (str): 通知标题
        message (str): 通知内容
        icon_path (str, optional): 图标路径
        app_name (str, optional): 应用名称
        timeout (int, optional): 显示时长（秒）

    Returns:
        bool: 是否发送成功
    """
    try:
        notification.notify(
            title=title,
            message=message,
            app_name=app_name,
            app_icon=icon_path if icon_path and os.path.exists(icon_path) else "",
            timeout=timeout,
        )
        return True
    except Exception as e:
        # plyer 在没有通知后端时会抛出各种异常
        logger.error(f"发送通知失败: {str(e)}")
        return False


def find_icon_path():
    """
    查找应用图标路径

    Returns:
        str or None: 找到的图标路径，如果未找到则返回None
    """
    base_path = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    icon_name = "gamemon.ico" if sys.platform == "win32" else "gamemon.png"
    icon_paths = [
        # 标准开发环境路径
        os.path.join(base_path, "assets", "icon", icon_name),
        # 打包环境路径
        os.path.join(os.path.dirname(sys.executable), icon_name),
    ]

    for path in icon_paths:
        if os.path.exists(path):
            return path

    return None


def notification_thread(message_queue, icon_path=None, stop_event=None, app_name="GameMon"):
    """
    通知线程函数，从队列中获取消息并发送通知

    Args:
        message_queue (queue.Queue): 消息队列
        icon_path (str, optional): 图标路径
        stop_event (threading.Event, optional): 停止事件
        app_name (str, optional): 应用名称
    """
    logger.debug("通知线程已启动")

    if stop_event is None:
        stop_event = threading.Event()

    while not stop_event.is_set():
        try:
            message = message_queue.get(timeout=0.5)
        except queue.Empty:
            continue

        try:
            send_notification(title=app_name, message=message, icon_path=icon_path, app_name=app_name)
        except Exception as e:
            logger.error(f"处理通知失败: {str(e)}")
            time.sleep(0.1)
        finally:
            message_queue.task_done()

    logger.debug("通知线程已终止")


def create_notification_thread(message_queue, icon_path=None, app_name="GameMon"):
    """
    创建并启动通知线程

    Args:
        message_queue (queue.Queue): 消息队列
        icon_path (str, optional): 图标路径
        app_name (str, optional): 应用名称

    Returns:
        (threading.Thread, threading.Event): 线程对象和停止事件
    """
    if icon_path is None:
        icon_path = find_icon_path()

    stop_event = threading.Event()

    thread = threading.Thread(
        target=notification_thread,
        args=(message_queue, icon_path, stop_event, app_name),
        name="GameMon-Notifications",
        daemon=True,
    )
    thread.start()

    return thread, stop_event
