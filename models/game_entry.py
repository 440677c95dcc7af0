#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
游戏条目模块
"""

from core.exceptions import ConfigLoadError


def normalize_executable(executable):
    """Key used by the active monitor table for an executable string."""
    return executable.strip().lower()


class GameEntry:
    """A configured executable-to-commands binding"""

    def __init__(self, name: str, executable: str, start_commands=None, end_commands=None):
        """
        初始化游戏条目

        Args:
            name (str): 显示名称
            executable (str): 要匹配的进程名
            start_commands (list, optional): 进程出现时依次执行的命令
            end_commands (list, optional): 进程消失时依次执行的命令
        """
        self.name = name
        self.executable = executable
        self.start_commands = list(start_commands or [])
        self.end_commands = list(end_commands or [])

    @property
    def key(self):
        return normalize_executable(self.executable)

    @classmethod
    def from_dict(cls, data):
        """
        从配置字典创建条目

        Both ``name`` and the older ``game_name`` spelling are accepted.

        Args:
            data (dict): 配置文件中的单个条目

        Returns:
            GameEntry: 条目对象

        Raises:
            ConfigLoadError: 条目缺少可执行文件名或命令列表格式错误
        """
        if not isinstance(data, dict):
            raise ConfigLoadError(f"entry must be a mapping, got {type(data).__name__}")

        executable = data.get("executable")
        if not isinstance(executable, str) or not executable.strip():
            raise ConfigLoadError(f"entry {data!r} has no executable")

        name = data.get("name", data.get("game_name")) or executable.strip()

        return cls(
            name=str(name),
            executable=executable.strip(),
            start_commands=_command_list(data, "start_commands"),
            end_commands=_command_list(data, "end_commands"),
        )

    def to_dict(self):
        return {
            "name": self.name,
            "executable": self.executable,
            "start_commands": list(self.start_commands),
            "end_commands": list(self.end_commands),
        }

    def __eq__(self, other):
        if not isinstance(other, GameEntry):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"GameEntry(name={self.name!r}, executable={self.executable!r})"


def _command_list(data, field):
    commands = data.get(field)
    if commands is None:
        return []
    if isinstance(commands, str):
        return [commands]
    if not isinstance(commands, list) or not all(isinstance(c, str) for c in commands):
        raise ConfigLoadError(f"{field} of entry {data.get('executable')!r} must be a list of strings")
    return commands
