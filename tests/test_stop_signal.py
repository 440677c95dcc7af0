import threading

from core.stop_signal import StopSignal


def test_signal_is_delivered_once():
    signal = StopSignal("game.bin")

    assert signal.send()
    assert not signal.send()
    assert signal.sent
    assert signal.wait(timeout=0)


def test_send_after_close_fails():
    signal = StopSignal()
    signal.close()

    assert not signal.send()
    assert not signal.wait(timeout=0)


def test_wait_times_out_without_signal():
    assert StopSignal().wait(timeout=0.05) is False


def test_wait_wakes_blocked_thread():
    signal = StopSignal()
    woke = threading.Event()

    def receiver():
        signal.wait()
        woke.set()

    thread = threading.Thread(target=receiver)
    thread.start()
    signal.send()
    thread.join(timeout=5)

    assert woke.is_set()


def test_only_one_of_many_senders_wins():
    signal = StopSignal()
    results = []
    lock = threading.Lock()

    def sender():
        delivered = signal.send()
        with lock:
            results.append(delivered)

    threads = [threading.Thread(target=sender) for _ in range(16)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert results.count(True) == 1
