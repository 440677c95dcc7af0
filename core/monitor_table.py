#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
活动监控表模块
"""

import threading


class ActiveMonitorTable:
    """
    Concurrent map from executable key to the monitor's StopSignal.

    Keys are spread over independent shards, each guarded by its own lock,
    so the reconciler and monitor threads only contend on the same shard.
    A value of None means the stop signal was already taken.
    """

    def __init__(self, shard_count=16):
        if shard_count < 1:
            raise ValueError("shard_count must be at least 1")
        self._shards = [({}, threading.Lock()) for _ in range(shard_count)]

    def _shard(self, key):
        return self._shards[hash(key) % len(self._shards)]

    def insert_if_absent(self, key, handle):
        """
        插入新的监控项

        Args:
            key (str): 可执行文件键
            handle (StopSignal): 停止信号

        Returns:
            bool: 是否插入成功；键已存在时返回False
        """
        items, lock = self._shard(key)
        with lock:
            if key in items:
                return False
            items[key] = handle
            return True

    def get(self, key, default=None):
        items, lock = self._shard(key)
        with lock:
            return items.get(key, default)

    def take(self, key):
        """
        取出停止信号，键保留在表中直到监控线程自行移除

        Returns:
            StopSignal or None: 尚未取出的信号，否则返回None
        """
        items, lock = self._shard(key)
        with lock:
            if key not in items:
                return None
            handle = items[key]
            items[key] = None
            return handle

    def remove(self, key):
        items, lock = self._shard(key)
        with lock:
            return items.pop(key, _MISSING) is not _MISSING

    def take_all(self):
        """
        取出所有尚未发送的停止信号，用于关闭时通知全部监控线程

        Returns:
            list: (键, 停止信号) 列表
        """
        taken = []
        for items, lock in self._shards:
            with lock:
                for key, handle in items.items():
                    if handle is not None:
                        taken.append((key, handle))
                        items[key] = None
        return taken

    def keys(self):
        result = []
        for items, lock in self._shards:
            with lock:
                result.extend(items.keys())
        return sorted(result)

    def __contains__(self, key):
        items, lock = self._shard(key)
        with lock:
            return key in items

    def __len__(self):
        total = 0
        for items, lock in self._shards:
            with lock:
                total += len(items)
        return total


_MISSING = object()
