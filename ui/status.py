#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
状态信息模块
"""


def get_status_info(watchdog, config_manager=None):
    """
    获取程序状态信息

    Args:
        watchdog: 看门狗对象
        config_manager (ConfigManager, optional): 配置管理器

    Returns:
        str: 状态信息文本
    """
    if not watchdog:
        return "程序未启动"

    status_lines = []
    status_lines.append("🟢 Watchdog running" if watchdog.running else "🔴 Watchdog stopped")
    if watchdog.error is not None:
        status_lines.append(f"❌ Stopped on error: {watchdog.error}")

    monitored = set(watchdog.get_monitored())
    running_games = [entry.name for entry in watchdog.entries if entry.key in monitored]

    if running_games:
        status_lines.append(f"🎮 Running: {', '.join(running_games)}")
    else:
        status_lines.append("🎮 No monitored game running")
    status_lines.append(f"📋 Configured games: {len(watchdog.entries)}")

    if config_manager is not None:
        status_lines.append("\n⚙️ Settings:")
        status_lines.append("  🔔 Notifications: " + ("on" if config_manager.show_notifications else "off"))
        status_lines.append(f"  ⏱️ Poll interval: {config_manager.poll_interval:g}s ({config_manager.match_mode} match)")
        status_lines.append(f"  📁 Config directory: {config_manager.config_dir}")
        status_lines.append(f"  📝 Log directory: {config_manager.log_dir}")

    return "\n".join(status_lines)
