#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
配置模块
"""

# 应用程序基本信息
APP_INFO = {
    "name": "GameMon",                        # 应用名称
    "version": "1.0.0",                       # 版本号
    "description": "Run commands when games start and stop",  # 应用描述
}

# 用户默认配置
DEFAULT_CONFIG = {
    "notifications": {
        "enabled": True                       # 通知默认开启
    },
    "logging": {
        "retention_days": 7,                  # 日志保留天数
        "rotation": "1 day",                  # 日志轮转周期
        "debug_mode": False,                  # 调试模式默认关闭
        "system_log": False                   # 同时写入系统日志
    },
    "monitor": {
        "poll_interval": 5,                   # 轮询间隔(秒)
        "scanner": "psutil",                  # 进程扫描方式: psutil / command
        "match_mode": "exact",                # 进程名匹配方式: exact / substring
        "max_scan_failures": 60,              # 连续扫描失败多少次后停止，0表示从不
        "command_timeout": 0,                 # 单条命令超时(秒)，0表示不限制
        "shutdown_timeout": 30                # 退出时等待结束命令的时间(秒)
    },
    "application": {
        "show_tray": True                     # 显示托盘图标
    }
}

# 系统配置
SYSTEM_CONFIG = {
    "config_dir_name": ".gamemon",            # 配置目录名称
    "log_dir_name": "logs",                   # 日志目录名称
    "config_file_name": "config.yaml",        # 配置文件名称
    "entries_file_name": "games.yaml",        # 游戏条目文件名称
}
