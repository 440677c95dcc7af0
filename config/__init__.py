#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""配置管理模块"""

from config.config_manager import ConfigManager
from config.app_config import APP_INFO, DEFAULT_CONFIG, SYSTEM_CONFIG

__all__ = ["ConfigManager", "APP_INFO", "DEFAULT_CONFIG", "SYSTEM_CONFIG"]
