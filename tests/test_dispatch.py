"""Tests for dispatch.py — main-context queue."""

import threading

from ignition.dispatch import MainContext


def test_run_pending_in_fifo_order():
    ctx = MainContext()
    seen = []
    ctx.schedule(seen.append, 1)
    ctx.schedule(seen.append, 2)
    ctx.schedule(seen.append, 3)
    assert seen == []
    assert ctx.run_pending() == 3
    assert seen == [1, 2, 3]
    assert ctx.run_pending() == 0


def test_calls_from_background_run_on_owner():
    ctx = MainContext()
    ran_on = []

    def worker():
        for _ in range(5):
            ctx.schedule(lambda: ran_on.append(threading.get_ident()))

    t = threading.Thread(target=worker)
    t.start()
    t.join()
    ctx.run_pending()
    assert ran_on == [threading.get_ident()] * 5


def test_run_until_returns_when_done():
    ctx = MainContext()
    state = {"done": False}

    def finish():
        state["done"] = True

    threading.Timer(0.05, ctx.schedule, args=(finish,)).start()
    assert ctx.run_until(lambda: state["done"], timeout=5) is True


def test_run_until_times_out():
    ctx = MainContext()
    assert ctx.run_until(lambda: False, timeout=0.05, poll=0.01) is False


def test_drain_from_other_thread_rejected():
    ctx = MainContext()
    errors = []

    def worker():
        try:
            ctx.run_pending()
        except RuntimeError as e:
            errors.append(e)

    t = threading.Thread(target=worker)
    t.start()
    t.join()
    assert len(errors) == 1
    assert "does not own" in str(errors[0])
