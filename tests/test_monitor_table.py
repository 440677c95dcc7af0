import threading

import pytest

from core.monitor_table import ActiveMonitorTable
from core.stop_signal import StopSignal


@pytest.fixture
def table():
    return ActiveMonitorTable(shard_count=4)


def test_insert_if_absent_keeps_first_handle(table):
    first, second = StopSignal(), StopSignal()

    assert table.insert_if_absent("game.bin", first)
    assert not table.insert_if_absent("game.bin", second)
    assert table.get("game.bin") is first


def test_take_consumes_handle_but_keeps_key(table):
    handle = StopSignal()
    table.insert_if_absent("game.bin", handle)

    assert table.take("game.bin") is handle
    assert table.take("game.bin") is None
    assert "game.bin" in table


def test_take_missing_key(table):
    assert table.take("missing") is None


def test_remove(table):
    table.insert_if_absent("game.bin", StopSignal())

    assert table.remove("game.bin")
    assert not table.remove("game.bin")
    assert "game.bin" not in table
    assert len(table) == 0


def test_take_all_returns_only_unconsumed(table):
    handles = {key: StopSignal(key) for key in ("a", "b", "c")}
    for key, handle in handles.items():
        table.insert_if_absent(key, handle)
    table.take("b")

    taken = dict(table.take_all())

    assert taken == {"a": handles["a"], "c": handles["c"]}
    assert table.keys() == ["a", "b", "c"]
    assert table.take_all() == []


def test_concurrent_inserts_admit_one_monitor(table):
    barrier = threading.Barrier(8)
    results = []
    lock = threading.Lock()

    def insert():
        barrier.wait()
        inserted = table.insert_if_absent("shared.bin", StopSignal())
        with lock:
            results.append(inserted)

    threads = [threading.Thread(target=insert) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert results.count(True) == 1
    assert len(table) == 1


def test_invalid_shard_count():
    with pytest.raises(ValueError):
        ActiveMonitorTable(shard_count=0)
