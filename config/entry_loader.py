#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
游戏条目加载模块

The watchdog calls load_entries once per poll cycle, so every call reads
the file again and returns a fresh list.
"""

import os
import yaml
from loguru import logger

from core.exceptions import ConfigLoadError
from models.game_entry import GameEntry


def load_entries(path):
    """
    读取游戏条目列表

    A missing or empty file means nothing to monitor. Entries whose
    executable duplicates an earlier one (case-insensitive) are skipped,
    so the first entry in file order owns that executable.

    Args:
        path (str): 条目文件路径

    Returns:
        list[GameEntry]: 按文件顺序排列的条目

    Raises:
        ConfigLoadError: 文件无法读取或内容格式错误
    """
    if not path or not os.path.exists(path):
        return []

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigLoadError(f"cannot read entries file {path}: {e}", path) from e
    except yaml.YAMLError as e:
        raise ConfigLoadError(f"malformed entries file {path}: {e}", path) from e

    if not data:
        return []

    if isinstance(data, dict):
        raw_entries = data.get("entries") or []
    else:
        raw_entries = data

    if not isinstance(raw_entries, list):
        raise ConfigLoadError(f"'entries' in {path} must be a list", path)

    entries = []
    owners = {}
    for index, raw in enumerate(raw_entries):
        try:
            entry = GameEntry.from_dict(raw)
        except ConfigLoadError as e:
            logger.warning(f"Skipping entry #{index + 1} in {path}: {e}")
            continue

        if entry.key in owners:
            logger.warning(
                f"Entry '{entry.name}' uses executable '{entry.executable}' already claimed by "
                f"'{owners[entry.key]}', ignoring it"
            )
            continue

        owners[entry.key] = entry.name
        entries.append(entry)

    return entries


def save_entries(path, entries):
    """
    保存游戏条目列表

    Args:
        path (str): 条目文件路径
        entries (list[GameEntry]): 条目列表
    """
    data = {"entries": [entry.to_dict() for entry in entries]}
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, default_flow_style=False, allow_unicode=True, sort_keys=False)
