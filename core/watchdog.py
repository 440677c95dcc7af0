#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
进程监控核心模块

The reconciler loop compares the configured entries with the live process
table and drives one monitor thread per presence episode.
"""

import functools
import queue
import threading
import time
from loguru import logger

from config.entry_loader import load_entries
from core.action_runner import run_commands
from core.exceptions import ConfigLoadError, GameMonError
from core.monitor_table import ActiveMonitorTable
from core.process_scanner import MATCH_EXACT, create_scanner
from core.stop_signal import StopSignal

PHASE_START = "start"
PHASE_END = "end"


class Watchdog:
    """游戏进程看门狗"""

    def __init__(
        self,
        entries_loader,
        scanner,
        poll_interval=5.0,
        match_mode=MATCH_EXACT,
        runner=run_commands,
        command_timeout=None,
        shutdown_timeout=30.0,
        show_notifications=True,
    ):
        """
        初始化看门狗

        Args:
            entries_loader (callable): 无参函数，每次调用返回最新的条目列表
            scanner (ProcessScanner): 进程扫描器
            poll_interval (float): 轮询间隔（秒）
            match_mode (str): 进程名匹配方式
            runner (callable): 命令执行函数，签名同 run_commands
            command_timeout (float, optional): 单条命令超时时间（秒）
            shutdown_timeout (float): 关闭时等待监控线程的时间（秒）
            show_notifications (bool): 是否发送通知消息
        """
        self.entries_loader = entries_loader
        self.scanner = scanner
        self.poll_interval = poll_interval
        self.match_mode = match_mode
        self.runner = runner
        self.command_timeout = command_timeout
        self.shutdown_timeout = shutdown_timeout
        self.show_notifications = show_notifications

        self.active_monitors = ActiveMonitorTable()
        self.message_queue = queue.Queue()  # 通知消息队列
        self.running = False
        self.error = None
        self.entries = []

        self._stop_event = threading.Event()
        self._thread = None
        self._config_loaded = False
        self._monitor_threads = []
        self._threads_lock = threading.Lock()

    @classmethod
    def from_config(cls, config_manager):
        """
        根据配置管理器创建看门狗

        Args:
            config_manager (ConfigManager): 配置管理器

        Returns:
            Watchdog: 看门狗对象
        """
        scanner = create_scanner(
            config_manager.scanner,
            min_interval=config_manager.poll_interval,
            max_failures=config_manager.max_scan_failures,
            match_mode=config_manager.match_mode,
        )
        return cls(
            entries_loader=functools.partial(load_entries, config_manager.entries_file),
            scanner=scanner,
            poll_interval=config_manager.poll_interval,
            match_mode=config_manager.match_mode,
            command_timeout=config_manager.command_timeout or None,
            shutdown_timeout=config_manager.shutdown_timeout,
            show_notifications=config_manager.show_notifications,
        )

    def add_message(self, message):
        """
        添加消息到通知队列

        Args:
            message (str): 消息内容
        """
        if self.show_notifications:
            self.message_queue.put(message)

    # ------------------------------------------------------------------
    # 轮询循环

    def start(self):
        """在后台线程中启动轮询循环"""
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop_event.clear()
        self.error = None
        self._thread = threading.Thread(target=self._run_thread, name="GameMon-Watchdog", daemon=True)
        self._thread.start()

    def _run_thread(self):
        try:
            self.run()
        except GameMonError as e:
            self.error = e
            logger.error(f"Watchdog stopped on fatal error: {e}")
            self.add_message(f"GameMon stopped: {e}")

    def run(self):
        """
        阻塞运行轮询循环，直到 stop() 被调用

        Raises:
            ConfigLoadError: 首次加载条目文件失败
            ProcessScanError: 进程表长期不可用
        """
        logger.info("Starting watchdog...")
        self.running = True
        try:
            while not self._stop_event.is_set():
                self.poll_once()
                self._stop_event.wait(self.poll_interval)
        finally:
            self.running = False
            self._shutdown_monitors()
            logger.info("Watchdog stopped")

    def stop(self, timeout=None):
        """
        停止轮询循环，并让所有活动监控执行结束命令

        Args:
            timeout (float, optional): 等待看门狗线程结束的时间（秒）
        """
        self._stop_event.set()
        thread = self._thread
        if thread is not None and thread.is_alive() and thread is not threading.current_thread():
            thread.join(timeout)
        else:
            self._shutdown_monitors()

    def is_alive(self):
        return self._thread is not None and self._thread.is_alive()

    def join(self, timeout=None):
        if self._thread is not None:
            self._thread.join(timeout)

    def poll_once(self):
        """
        执行一次轮询

        Returns:
            bool: 本轮是否完成了对账；加载或扫描失败时返回False
        """
        entries = self._load_entries()
        if entries is None:
            return False

        # 每轮只刷新一次进程表，所有条目共用同一个快照
        snapshot = self.scanner.refresh(force=True)
        if snapshot is None:
            logger.warning("Process table unavailable, skipping this cycle")
            return False

        self.reconcile(entries, snapshot)
        return True

    def _load_entries(self):
        try:
            entries = self.entries_loader()
        except ConfigLoadError as e:
            if not self._config_loaded:
                raise
            logger.error(f"Failed to reload entries, skipping this cycle: {e}")
            return None

        self._config_loaded = True
        self.entries = entries
        return entries

    def reconcile(self, entries, snapshot):
        """
        根据进程快照启动或通知监控线程

        Args:
            entries (list[GameEntry]): 按配置顺序排列的条目
            snapshot (ProcessSnapshot): 本轮的进程快照
        """
        running = {entry.key for entry in entries if snapshot.is_running(entry.executable, self.match_mode)}

        for entry in entries:
            if self._stop_event.is_set():
                break

            is_running = entry.key in running
            is_monitored = entry.key in self.active_monitors

            try:
                if is_running and not is_monitored:
                    self._start_monitor(entry)
                elif not is_running and is_monitored:
                    self._signal_stop(entry)
            except Exception:
                logger.exception(f"Failed to update monitor for '{entry.executable}'")

        # 条目被删除或可执行文件被修改时，原有监控也要收到停止信号
        configured = {entry.key for entry in entries}
        for key in self.active_monitors.keys():
            if self._stop_event.is_set():
                break
            if key in configured:
                continue
            stop_signal = self.active_monitors.take(key)
            if stop_signal is None:
                continue
            logger.info(f"'{key}' is no longer configured, sending termination signal...")
            if not stop_signal.send():
                logger.debug(f"Monitor for '{key}' already closed")

    # ------------------------------------------------------------------
    # 监控线程

    def _start_monitor(self, entry):
        stop_signal = StopSignal(entry.key)
        if not self.active_monitors.insert_if_absent(entry.key, stop_signal):
            return

        logger.info(f"Detected process '{entry.executable}' is running, starting monitor...")
        thread = threading.Thread(
            target=self._monitor_process,
            args=(entry, stop_signal),
            name=f"GameMon-Monitor-{entry.key}",
            daemon=True,
        )
        with self._threads_lock:
            self._monitor_threads = [t for t in self._monitor_threads if t.is_alive()]
            self._monitor_threads.append(thread)
        try:
            thread.start()
        except RuntimeError:
            self.active_monitors.remove(entry.key)
            raise

    def _signal_stop(self, entry):
        stop_signal = self.active_monitors.take(entry.key)
        if stop_signal is None:
            return

        logger.info(f"Process '{entry.executable}' stopped, sending termination signal...")
        if not stop_signal.send():
            logger.debug(f"Failed to send termination signal to '{entry.executable}', likely already closed.")

    def _monitor_process(self, entry, stop_signal):
        """
        单个游戏的监控线程：执行开始命令，等待停止信号，再执行结束命令

        Args:
            entry (GameEntry): 游戏条目
            stop_signal (StopSignal): 停止信号
        """
        try:
            self.add_message(f"Detected {entry.name}")
            self._run_phase(entry, PHASE_START)

            # 开始命令失败也要等到进程退出，否则下一轮会重复触发
            logger.info(f"Monitoring process '{entry.executable}'. Waiting for termination signal...")
            stop_signal.wait()
            logger.info(f"Received termination signal for process '{entry.executable}'.")

            self._run_phase(entry, PHASE_END)
            self.add_message(f"{entry.name} closed")
        finally:
            stop_signal.close()
            self.active_monitors.remove(entry.key)
            logger.info(f"Removed '{entry.executable}' from active monitoring.")

    def _run_phase(self, entry, phase):
        commands = entry.start_commands if phase == PHASE_START else entry.end_commands
        try:
            return self.runner(commands, f"{entry.name} {phase}", self.command_timeout)
        except Exception:
            logger.exception(f"Failed to run {phase} commands for '{entry.name}'")
            return None

    def _shutdown_monitors(self):
        pending = self.active_monitors.take_all()
        for key, stop_signal in pending:
            logger.info(f"Shutting down monitor for '{key}'")
            if not stop_signal.send():
                logger.debug(f"Monitor for '{key}' already closed")

        with self._threads_lock:
            threads = list(self._monitor_threads)

        # 所有监控线程共用一个截止时间
        deadline = time.monotonic() + self.shutdown_timeout
        for thread in threads:
            if thread is not threading.current_thread():
                thread.join(max(0.0, deadline - time.monotonic()))
            if thread.is_alive():
                logger.warning(f"{thread.name} did not finish within {self.shutdown_timeout}s")

    # ------------------------------------------------------------------
    # 托盘菜单等外部请求

    def find_entry(self, game_name):
        """
        根据名称查找游戏条目

        Args:
            game_name (str): 游戏名称

        Returns:
            GameEntry or None: 条目对象，未找到则返回None
        """
        for entry in self.entries:
            if entry.name == game_name:
                return entry

        try:
            entries = self.entries_loader()
        except ConfigLoadError as e:
            logger.error(f"Failed to load entries: {e}")
            return None

        for entry in entries:
            if entry.name == game_name:
                return entry
        return None

    def run_entry_commands(self, game_name, phase):
        """
        手动执行某个游戏的开始或结束命令，不影响监控状态

        Args:
            game_name (str): 游戏名称
            phase (str): start 或 end

        Returns:
            ActionResult or None: 执行结果，游戏或阶段无效时返回None
        """
        if phase not in (PHASE_START, PHASE_END):
            logger.error(f"Unknown command phase '{phase}'")
            return None

        entry = self.find_entry(game_name)
        if entry is None:
            logger.error(f"No entry named '{game_name}'")
            return None

        commands = entry.start_commands if phase == PHASE_START else entry.end_commands
        logger.info(f"Running {phase} commands for '{game_name}' on request")
        return self.runner(commands, f"{entry.name} {phase}", self.command_timeout)

    def dispatch_command(self, message):
        """
        处理 "start:<游戏名>" / "end:<游戏名>" 格式的请求

        Args:
            message (str): 请求内容

        Returns:
            ActionResult or None: 执行结果
        """
        phase, sep, game_name = message.partition(":")
        if not sep or not game_name:
            logger.error(f"Malformed command request: {message!r}")
            return None
        return self.run_entry_commands(game_name, phase.strip().lower())

    def get_monitored(self):
        """当前处于监控中的可执行文件键"""
        return self.active_monitors.keys()
