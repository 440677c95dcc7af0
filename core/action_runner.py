#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
命令执行模块
"""

import subprocess
import sys
from loguru import logger


class CommandResult:
    """单条命令的执行结果"""

    def __init__(self, command, returncode=None, stdout="", stderr="", error=None):
        self.command = command
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.error = error

    @property
    def ok(self):
        return self.error is None and self.returncode == 0

    def __repr__(self):
        return f"CommandResult({self.command!r}, returncode={self.returncode}, error={self.error!r})"


class ActionResult:
    """一组命令的执行结果，只用于日志"""

    def __init__(self, label=None):
        self.label = label
        self.results = []

    @property
    def failures(self):
        return [result for result in self.results if not result.ok]

    @property
    def ok(self):
        return not self.failures

    def __len__(self):
        return len(self.results)


def run_shell_command(command, timeout=None):
    """
    通过系统shell执行一条命令并等待结束

    Pipes, redirects and chained operators work as typed because the
    string is handed to the host shell unchanged.

    Args:
        command (str): 命令字符串
        timeout (float, optional): 超时时间（秒）

    Returns:
        CommandResult: 执行结果
    """
    if not command or not command.strip():
        logger.error("Empty command string; nothing to execute.")
        return CommandResult(command, error="empty command")

    logger.info(f"🟢 Running command: {command}")

    kwargs = {}
    if sys.platform == "win32":
        kwargs["creationflags"] = subprocess.CREATE_NO_WINDOW

    try:
        completed = subprocess.run(
            command,
            shell=True,
            capture_output=True,
            text=True,
            errors="replace",
            timeout=timeout,
            **kwargs,
        )
    except subprocess.TimeoutExpired:
        logger.error(f"❌ Command timed out after {timeout}s: {command}")
        return CommandResult(command, error=f"timed out after {timeout}s")
    except (OSError, ValueError) as e:
        # ValueError: 命令中含有空字符等无法传给shell的内容
        logger.error(f"❌ Failed to execute command '{command}': {e}")
        return CommandResult(command, error=str(e))

    if completed.stdout:
        logger.info(f"STDOUT:\n{completed.stdout.rstrip()}")
    if completed.stderr:
        logger.warning(f"STDERR:\n{completed.stderr.rstrip()}")

    if completed.returncode == 0:
        logger.info("✅ Command executed successfully.")
    else:
        logger.error(f"❌ Command exited with status {completed.returncode}: {command}")

    return CommandResult(command, completed.returncode, completed.stdout, completed.stderr)


def run_commands(commands, label=None, timeout=None):
    """
    依次执行命令列表，前面的命令失败不会影响后面的命令

    Args:
        commands (list[str]): 命令列表
        label (str, optional): 日志中使用的名称
        timeout (float, optional): 单条命令超时时间（秒）

    Returns:
        ActionResult: 汇总结果
    """
    action = ActionResult(label)
    if not commands:
        return action

    if label:
        logger.debug(f"Running {len(commands)} command(s) for {label}")

    for command in commands:
        action.results.append(run_shell_command(command, timeout=timeout))

    if not action.ok:
        logger.warning(
            f"{len(action.failures)} of {len(action)} command(s) failed"
            + (f" for {label}" if label else "")
        )
    return action
