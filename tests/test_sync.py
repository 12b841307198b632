import threading
import time

import pytest

from checksum.core.sync import WaitGroup


def _wait_in_thread(wg):
    """Corre wg.wait() numa thread; devolve a thread para o teste fazer join."""
    t = threading.Thread(target=wg.wait, daemon=True)
    t.start()
    return t


def test_wait_returns_immediately_when_empty():
    t = _wait_in_thread(WaitGroup())
    t.join(timeout=1)
    assert not t.is_alive()


def test_wait_set_can_grow_while_waiting():
    wg = WaitGroup()
    wg.add()
    finished = []
    release = threading.Event()

    def _worker(i):
        release.wait()
        finished.append(i)
        wg.done()

    waiter = _wait_in_thread(wg)

    for i in range(50):
        wg.add()
        threading.Thread(target=_worker, args=(i,)).start()
    wg.done()

    time.sleep(0.05)
    assert waiter.is_alive()   # ainda há 50 pendentes

    release.set()
    waiter.join(timeout=10)
    assert not waiter.is_alive()
    assert sorted(finished) == list(range(50))


def test_negative_counter_rejected():
    with pytest.raises(ValueError):
        WaitGroup().done()


def test_context_manager_counts_as_one_task():
    wg = WaitGroup()
    inside = threading.Event()
    leave = threading.Event()

    def _task():
        with wg:
            inside.set()
            leave.wait()

    threading.Thread(target=_task).start()
    inside.wait()
    waiter = _wait_in_thread(wg)
    time.sleep(0.05)
    assert waiter.is_alive()

    leave.set()
    waiter.join(timeout=5)
    assert not waiter.is_alive()
