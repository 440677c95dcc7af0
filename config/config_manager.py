#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
配置管理模块
"""

import copy
import os
import yaml
from utils.logger import logger
from config.app_config import APP_INFO, DEFAULT_CONFIG, SYSTEM_CONFIG
from config.entry_loader import save_entries
from core.process_scanner import MATCH_MODES, SCANNERS


class ConfigManager:
    """配置管理类"""

    def __init__(self, custom_app_info=None, custom_default_config=None, custom_system_config=None, config_dir=None):
        """
        初始化配置管理器

        Args:
            custom_app_info (dict, optional): 自定义应用信息，用于覆盖默认值
            custom_default_config (dict, optional): 自定义默认配置，用于覆盖默认值
            custom_system_config (dict, optional): 自定义系统配置，用于覆盖默认值
            config_dir (str, optional): 配置目录，默认为用户主目录下的 .gamemon
        """
        # 合并配置
        self.app_info = APP_INFO.copy()
        if custom_app_info:
            self.app_info.update(custom_app_info)

        self.default_config = copy.deepcopy(DEFAULT_CONFIG)
        if custom_default_config:
            self._deep_update(self.default_config, custom_default_config)

        self.system_config = SYSTEM_CONFIG.copy()
        if custom_system_config:
            self.system_config.update(custom_system_config)

        # 设置配置路径
        if config_dir is None:
            config_dir = os.path.join(os.path.expanduser("~"), self.system_config["config_dir_name"])
        self.config_dir = config_dir
        self.log_dir = os.path.join(self.config_dir, self.system_config["log_dir_name"])
        self.config_file = os.path.join(self.config_dir, self.system_config["config_file_name"])
        self.entries_file = os.path.join(self.config_dir, self.system_config["entries_file_name"])

        self._apply(self.default_config)

        # 确保配置目录存在
        self._ensure_directories()

        # 加载配置文件
        self.load_config()

    def _deep_update(self, d, u):
        """
        递归更新嵌套字典

        Args:
            d (dict): 要更新的目标字典
            u (dict): 包含更新值的字典
        """
        for k, v in u.items():
            if isinstance(v, dict) and k in d and isinstance(d[k], dict):
                self._deep_update(d[k], v)
            else:
                d[k] = v

    def _apply(self, config_data):
        """从完整的配置字典设置属性"""
        self.show_notifications = bool(config_data["notifications"]["enabled"])

        self.log_retention_days = int(config_data["logging"]["retention_days"])
        self.log_rotation = config_data["logging"]["rotation"]
        self.debug_mode = bool(config_data["logging"]["debug_mode"])
        self.system_log = bool(config_data["logging"]["system_log"])

        monitor = config_data["monitor"]
        self.poll_interval = max(1.0, float(monitor["poll_interval"]))
        self.scanner = monitor["scanner"]
        self.match_mode = monitor["match_mode"]
        self.max_scan_failures = max(0, int(monitor["max_scan_failures"]))
        self.command_timeout = max(0.0, float(monitor["command_timeout"]))
        self.shutdown_timeout = max(0.0, float(monitor["shutdown_timeout"]))

        self.show_tray = bool(config_data["application"]["show_tray"])

    def _ensure_directories(self):
        """确保配置和日志目录以及条目文件存在"""
        for directory in (self.config_dir, self.log_dir):
            if not os.path.exists(directory):
                try:
                    os.makedirs(directory)
                    logger.debug(f"已创建目录: {directory}")
                except OSError as e:
                    logger.error(f"创建目录失败: {str(e)}")

        if not os.path.exists(self.entries_file):
            try:
                save_entries(self.entries_file, [])
                logger.debug(f"已创建空的游戏条目文件: {self.entries_file}")
            except OSError as e:
                logger.error(f"创建游戏条目文件失败: {str(e)}")

    def load_config(self):
        """
        加载配置文件

        Returns:
            bool: 是否加载成功
        """
        if not os.path.exists(self.config_file):
            logger.debug("配置文件不存在，将创建默认配置文件")
            self._create_default_config()
            return True

        try:
            with open(self.config_file, "r", encoding="utf-8") as f:
                config_data = yaml.safe_load(f)

            # 如果配置文件为空或无效，使用默认配置
            if not config_data:
                logger.warning("配置文件为空或无效，将使用默认配置")
                self._apply(self.default_config)
                return True

            if not isinstance(config_data, dict):
                raise ValueError("配置文件顶层必须是字典")

            merged = copy.deepcopy(self.default_config)
            self._deep_update(merged, config_data)

            if merged["monitor"]["scanner"] not in SCANNERS:
                logger.warning(
                    f"配置文件中的扫描方式无效: {merged['monitor']['scanner']}，"
                    f"使用默认值: {self.default_config['monitor']['scanner']}"
                )
                merged["monitor"]["scanner"] = self.default_config["monitor"]["scanner"]

            if merged["monitor"]["match_mode"] not in MATCH_MODES:
                logger.warning(
                    f"配置文件中的匹配方式无效: {merged['monitor']['match_mode']}，"
                    f"使用默认值: {self.default_config['monitor']['match_mode']}"
                )
                merged["monitor"]["match_mode"] = self.default_config["monitor"]["match_mode"]

            self._apply(merged)
            logger.debug("配置文件加载成功")
            return True
        except (OSError, yaml.YAMLError, ValueError, TypeError, KeyError) as e:
            logger.error(f"加载配置文件失败: {str(e)}")
            # 使用默认配置
            self._create_default_config()
            return False

    def _create_default_config(self):
        """创建默认配置文件"""
        self._apply(self.default_config)
        try:
            with open(self.config_file, "w", encoding="utf-8") as f:
                yaml.dump(self.default_config, f, default_flow_style=False, allow_unicode=True)
            logger.debug("已创建并加载默认配置")
        except OSError as e:
            logger.error(f"创建默认配置文件失败: {str(e)}")

    def to_dict(self):
        """当前设置组成的配置字典"""
        return {
            "notifications": {"enabled": self.show_notifications},
            "logging": {
                "retention_days": self.log_retention_days,
                "rotation": self.log_rotation,
                "debug_mode": self.debug_mode,
                "system_log": self.system_log,
            },
            "monitor": {
                "poll_interval": self.poll_interval,
                "scanner": self.scanner,
                "match_mode": self.match_mode,
                "max_scan_failures": self.max_scan_failures,
                "command_timeout": self.command_timeout,
                "shutdown_timeout": self.shutdown_timeout,
            },
            "application": {"show_tray": self.show_tray},
        }

    def save_config(self):
        """
        保存配置到文件

        Returns:
            bool: 保存是否成功
        """
        try:
            with open(self.config_file, "w", encoding="utf-8") as f:
                yaml.dump(self.to_dict(), f, default_flow_style=False, allow_unicode=True)

            logger.debug("配置已保存")
            return True
        except OSError as e:
            logger.error(f"保存配置文件失败: {str(e)}")
            return False

    def get_app_name(self):
        """获取应用名称"""
        return self.app_info["name"]

    def get_app_version(self):
        """获取应用版本"""
        return self.app_info["version"]

    def get_app_description(self):
        """获取应用描述"""
        return self.app_info["description"]
