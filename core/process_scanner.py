#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
进程扫描模块
"""

import csv
import io
import subprocess
import sys
import time
import psutil
from loguru import logger

from core.exceptions import ProcessScanError

MATCH_EXACT = "exact"
MATCH_SUBSTRING = "substring"
MATCH_MODES = (MATCH_EXACT, MATCH_SUBSTRING)


def _strip_exe(name):
    return name[:-4] if name.endswith(".exe") else name


def _basename(path):
    # 同时处理 Windows 和 POSIX 风格的路径
    return path.replace("\\", "/").rsplit("/", 1)[-1]


class ProcessSnapshot:
    """One capture of the process table, shared by every entry in a cycle"""

    def __init__(self, processes, taken_at=None):
        """
        Args:
            processes (iterable): (进程名, 命令行) 元组，命令行可以为空
            taken_at (float, optional): 采集时间
        """
        self.taken_at = time.time() if taken_at is None else taken_at
        self.names = set()
        self.command_lines = []
        self._exact_names = set()

        for name, cmdline in processes:
            name = (name or "").strip().lower()
            if name:
                self.names.add(name)
                self._exact_names.add(_strip_exe(name))

            if isinstance(cmdline, (list, tuple)):
                args = [str(arg) for arg in cmdline if arg]
                cmdline = " ".join(args)
            else:
                cmdline = cmdline or ""
                args = cmdline.split()
            cmdline = cmdline.strip().lower()
            if cmdline:
                self.command_lines.append(cmdline)
            if args:
                self._exact_names.add(_strip_exe(_basename(args[0].strip().lower())))

    def __len__(self):
        return len(self.names)

    def is_running(self, executable, match_mode=MATCH_EXACT):
        """
        判断进程是否在快照中

        Args:
            executable (str): 进程名
            match_mode (str): exact 或 substring

        Returns:
            bool: 是否有匹配的进程
        """
        target = (executable or "").strip().lower()
        if not target:
            return False

        if match_mode == MATCH_SUBSTRING:
            if any(target in name for name in self.names):
                return True
            return any(
                target in line for line in self.command_lines if "grep" not in line
            )

        return _strip_exe(target) in self._exact_names


class ProcessScanner:
    """
    Base scanner. Subclasses implement _enumerate() and return
    (name, cmdline) pairs for every process on the host.
    """

    def __init__(self, min_interval=5.0, max_failures=60, match_mode=MATCH_EXACT):
        """
        Args:
            min_interval (float): 两次刷新之间的最小间隔（秒）
            max_failures (int): 连续失败多少次后视为致命错误，0 表示从不
            match_mode (str): is_running() 使用的匹配方式
        """
        if match_mode not in MATCH_MODES:
            raise ValueError(f"unknown match mode: {match_mode}")
        self.min_interval = min_interval
        self.max_failures = max_failures
        self.match_mode = match_mode
        self.consecutive_failures = 0
        self._snapshot = None
        self._last_refresh = None

    def _enumerate(self):
        raise NotImplementedError

    def refresh(self, force=False):
        """
        刷新进程快照

        Args:
            force (bool): 忽略最小刷新间隔

        Returns:
            ProcessSnapshot or None: 快照，枚举失败时返回None

        Raises:
            ProcessScanError: 连续失败次数达到上限
        """
        now = time.monotonic()
        if (
            not force
            and self._snapshot is not None
            and self._last_refresh is not None
            and now - self._last_refresh < self.min_interval
        ):
            return self._snapshot

        try:
            processes = list(self._enumerate())
        except (psutil.Error, OSError, subprocess.SubprocessError, ValueError) as e:
            self.consecutive_failures += 1
            self._snapshot = None
            logger.error(f"Process table refresh failed ({self.consecutive_failures} in a row): {e}")
            if self.max_failures and self.consecutive_failures >= self.max_failures:
                raise ProcessScanError(
                    f"process table unavailable after {self.consecutive_failures} attempts: {e}"
                ) from e
            return None

        self.consecutive_failures = 0
        self._snapshot = ProcessSnapshot(processes)
        self._last_refresh = now
        return self._snapshot

    def is_running(self, executable):
        snapshot = self.refresh()
        if snapshot is None:
            return False
        return snapshot.is_running(executable, self.match_mode)


class PsutilProcessScanner(ProcessScanner):
    """Reads the process table through psutil"""

    def _enumerate(self):
        processes = []
        for proc in psutil.process_iter(["name", "cmdline"]):
            try:
                name = proc.info.get("name")
                cmdline = proc.info.get("cmdline")
            except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
                continue
            processes.append((name, cmdline or []))
        return processes


class CommandProcessScanner(ProcessScanner):
    """Shells out to ps / tasklist and parses the text output"""

    def __init__(self, *args, timeout=10, **kwargs):
        super().__init__(*args, **kwargs)
        self.timeout = timeout

    def _enumerate(self):
        if sys.platform == "win32":
            return self._enumerate_tasklist()
        return self._enumerate_ps()

    def _enumerate_ps(self):
        result = subprocess.run(
            ["ps", "-A", "-o", "args="],
            capture_output=True,
            text=True,
            timeout=self.timeout,
            check=True,
        )
        processes = []
        for line in result.stdout.splitlines():
            line = line.strip()
            if not line:
                continue
            processes.append((_basename(line.split()[0]), line))
        return processes

    def _enumerate_tasklist(self):
        result = subprocess.run(
            ["tasklist", "/FO", "CSV", "/NH"],
            capture_output=True,
            text=True,
            timeout=self.timeout,
            check=True,
            creationflags=getattr(subprocess, "CREATE_NO_WINDOW", 0),
        )
        processes = []
        for row in csv.reader(io.StringIO(result.stdout)):
            if row:
                processes.append((row[0], ""))
        return processes


SCANNERS = {
    "psutil": PsutilProcessScanner,
    "command": CommandProcessScanner,
}


def create_scanner(strategy="psutil", **kwargs):
    """
    按名称创建进程扫描器

    Args:
        strategy (str): psutil 或 command
        **kwargs: 传给扫描器构造函数的参数

    Returns:
        ProcessScanner: 扫描器对象
    """
    try:
        scanner_cls = SCANNERS[strategy]
    except KeyError:
        raise ValueError(f"unknown scanner strategy: {strategy}") from None
    logger.debug(f"Using {scanner_cls.__name__} for process detection")
    return scanner_cls(**kwargs)
