#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
系统托盘界面模块
"""

import os
import subprocess
import sys
import threading
from PIL import Image, ImageDraw
from pystray import MenuItem, Menu, Icon
from loguru import logger
from utils.notification import send_notification
from ui.status import get_status_info


def create_default_image(size=64):
    """
    没有图标文件时绘制默认图标

    Args:
        size (int): 图标边长

    Returns:
        PIL.Image.Image: 图标图像
    """
    image = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    draw = ImageDraw.Draw(image)
    margin = size // 8
    draw.rounded_rectangle(
        (margin, size // 4, size - margin, size - size // 4),
        radius=size // 6,
        fill=(46, 125, 50, 255),
    )
    dot = size // 10
    center_y = size // 2
    draw.ellipse((size // 4 - dot, center_y - dot, size // 4 + dot, center_y + dot), fill="white")
    draw.ellipse((size * 3 // 4 - dot, center_y - dot, size * 3 // 4 + dot, center_y + dot), fill="white")
    return image


def open_directory(path):
    """使用系统默认的文件浏览器打开目录"""
    os.makedirs(path, exist_ok=True)
    if sys.platform == "win32":
        os.startfile(path)
    elif sys.platform == "darwin":
        subprocess.Popen(["open", path])
    else:
        subprocess.Popen(["xdg-open", path])


def create_tray_icon(watchdog, config_manager, icon_path=None):
    """
    创建系统托盘图标

    Args:
        watchdog (Watchdog): 看门狗对象
        config_manager (ConfigManager): 配置管理器
        icon_path (str, optional): 图标路径

    Returns:
        Icon: 系统托盘图标对象
    """
    image = Image.open(icon_path) if icon_path else create_default_image()
    app_name = config_manager.get_app_name()

    def run_in_background(message):
        # 命令可能耗时较长，不能阻塞托盘事件循环
        threading.Thread(target=watchdog.dispatch_command, args=(message,), daemon=True).start()

    def show_status():
        send_notification(
            title=f"{app_name} 状态",
            message=get_status_info(watchdog, config_manager),
            icon_path=icon_path,
            app_name=app_name,
        )

    def toggle_notifications():
        config_manager.show_notifications = not config_manager.show_notifications
        watchdog.show_notifications = config_manager.show_notifications
        state = "on" if config_manager.show_notifications else "off"
        if config_manager.save_config():
            logger.info(f"Notifications turned {state}")
        else:
            logger.warning(f"Notifications turned {state} but the setting could not be saved")

    def is_notifications_enabled(item):
        return config_manager.show_notifications

    def make_command_callback(message):
        def callback():
            run_in_background(message)

        return callback

    def game_menu_items():
        if not watchdog.entries:
            return [MenuItem("(no games configured)", None, enabled=False)]

        items = []
        for entry in watchdog.entries:
            monitored = entry.key in watchdog.active_monitors
            items.append(
                MenuItem(
                    f"{'▶ ' if monitored else ''}{entry.name}",
                    Menu(
                        MenuItem("Run Start Commands", make_command_callback(f"start:{entry.name}")),
                        MenuItem("Run End Commands", make_command_callback(f"end:{entry.name}")),
                    ),
                )
            )
        return items

    def open_config_dir():
        try:
            open_directory(config_manager.config_dir)
            logger.info(f"已打开配置目录: {config_manager.config_dir}")
        except OSError as e:
            logger.error(f"打开配置目录失败: {str(e)}")

    def exit_app():
        watchdog.stop()
        tray_icon.stop()

    menu = Menu(
        MenuItem(f"{app_name} v{config_manager.get_app_version()}", None, enabled=False),
        Menu.SEPARATOR,
        MenuItem("Show status", show_status),
        MenuItem("Notifications", toggle_notifications, checked=is_notifications_enabled),
        Menu.SEPARATOR,
        MenuItem("Games", Menu(game_menu_items)),
        Menu.SEPARATOR,
        MenuItem("Open config directory", open_config_dir),
        Menu.SEPARATOR,
        MenuItem("Exit", exit_app),
    )

    tray_icon = Icon("gamemon", image, app_name, menu)

    return tray_icon
