#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
GameMon主程序入口
"""

import sys

from config import ConfigManager, APP_INFO, SYSTEM_CONFIG
from core.watchdog import Watchdog
from utils import (
    logger,
    setup_logger,
    find_icon_path,
    create_notification_thread,
)


def main(custom_app_info=None, custom_default_config=None, custom_system_config=None):
    """
    主程序入口函数

    Args:
        custom_app_info (dict, optional): 自定义应用信息，用于覆盖默认值
        custom_default_config (dict, optional): 自定义默认配置，用于覆盖默认值
        custom_system_config (dict, optional): 自定义系统配置，用于覆盖默认值

    Returns:
        int: 退出码，看门狗因致命错误停止时为1
    """
    # 合并应用信息
    final_app_info = APP_INFO.copy()
    if custom_app_info:
        final_app_info.update(custom_app_info)

    # 合并系统配置
    final_system_config = SYSTEM_CONFIG.copy()
    if custom_system_config:
        final_system_config.update(custom_system_config)

    # 创建配置管理器
    config_manager = ConfigManager(
        custom_app_info=final_app_info,
        custom_default_config=custom_default_config,
        custom_system_config=final_system_config,
    )

    # 配置日志系统
    setup_logger(
        config_manager.log_dir,
        config_manager.log_retention_days,
        config_manager.log_rotation,
        config_manager.debug_mode,
        config_manager.system_log,
        app_name=config_manager.get_app_name(),
    )

    show_tray = config_manager.show_tray and "--no-tray" not in sys.argv

    watchdog = Watchdog.from_config(config_manager)

    logger.info(f"🟩 {config_manager.get_app_name()} v{config_manager.get_app_version()} 已启动")
    logger.info(f"游戏条目文件: {config_manager.entries_file}")

    icon_path = find_icon_path()

    # 创建通知线程
    notification_thread_obj, stop_event = create_notification_thread(
        watchdog.message_queue, icon_path, config_manager.get_app_name()
    )

    watchdog.start()

    try:
        if show_tray:
            # pystray 在导入时就会选择图形后端，只在需要托盘时导入
            from ui.tray_icon import create_tray_icon

            tray_icon = create_tray_icon(watchdog, config_manager, icon_path)
            tray_icon.run()
        else:
            while watchdog.is_alive():
                watchdog.join(timeout=1)
    except KeyboardInterrupt:
        pass
    finally:
        # 停止看门狗，活动监控会执行各自的结束命令
        watchdog.stop()

        stop_event.set()
        notification_thread_obj.join(timeout=0.5)

        logger.info(f"🔴 {config_manager.get_app_name()} 已退出")

    return 1 if watchdog.error is not None else 0


if __name__ == "__main__":
    sys.exit(main())
