#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
一次性停止信号模块
"""

import threading


class StopSignal:
    """
    Send-once / receive-once stop notification for a single monitor task.

    The reconciler holds it as the sender and calls send(); the monitor
    task waits on it and calls close() once it has finished.
    """

    def __init__(self, name=""):
        self.name = name
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._sent = False
        self._closed = False

    @property
    def sent(self):
        return self._sent

    @property
    def closed(self):
        return self._closed

    def send(self):
        """
        发送停止信号

        Returns:
            bool: 信号是否送达；已发送过或接收方已关闭时返回False
        """
        with self._lock:
            if self._sent or self._closed:
                return False
            self._sent = True
        self._event.set()
        return True

    def wait(self, timeout=None):
        """
        阻塞等待停止信号

        Args:
            timeout (float, optional): 超时时间（秒），None表示一直等待

        Returns:
            bool: 是否收到信号
        """
        return self._event.wait(timeout)

    def close(self):
        """接收方退出，之后的send()都会失败"""
        with self._lock:
            self._closed = True

    def __repr__(self):
        state = "closed" if self._closed else ("sent" if self._sent else "armed")
        return f"StopSignal({self.name!r}, {state})"
