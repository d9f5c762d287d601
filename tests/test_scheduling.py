"""Tests for debounced writes."""

from __future__ import annotations

import threading

from resume_optimizer.scheduling import DebouncedWriter, ThreadingScheduler


class TestDebouncedWriter:
    def test_rapid_submits_coalesce(self, scheduler):
        written = []
        writer = DebouncedWriter(written.append, 2.0, scheduler)
        writer.submit("a")
        writer.submit("b")
        writer.submit("c")

        assert written == []
        assert writer.pending
        assert scheduler.timers[0].cancelled and scheduler.timers[1].cancelled

        scheduler.run_all()
        assert written == ["c"]
        assert not writer.pending

    def test_flush_writes_immediately_once(self, scheduler):
        written = []
        writer = DebouncedWriter(written.append, 2.0, scheduler)
        writer.submit("doc")
        writer.flush()
        assert written == ["doc"]

        scheduler.run_all()
        writer.flush()
        assert written == ["doc"]

    def test_cancel_drops_pending(self, scheduler):
        written = []
        writer = DebouncedWriter(written.append, 2.0, scheduler)
        writer.submit("doc")
        writer.cancel()
        scheduler.run_all()
        writer.flush()
        assert written == []

    def test_cancel_runs_then(self, scheduler):
        events = []
        writer = DebouncedWriter(events.append, 2.0, scheduler)
        writer.submit("doc")
        writer.cancel(then=lambda: events.append("cleared"))
        scheduler.run_all()
        assert events == ["cleared"]

    def test_cancel_waits_for_write_in_progress(self, scheduler):
        events = []
        started = threading.Event()
        release = threading.Event()

        def slow_write(payload):
            started.set()
            release.wait(timeout=2.0)
            events.append(payload)

        writer = DebouncedWriter(slow_write, 2.0, scheduler)
        writer.submit("doc")
        flusher = threading.Thread(target=writer.flush)
        flusher.start()
        assert started.wait(timeout=2.0)

        canceller = threading.Thread(
            target=writer.cancel, kwargs={"then": lambda: events.append("cleared")}
        )
        canceller.start()
        canceller.join(timeout=0.1)
        assert events == []

        release.set()
        flusher.join(timeout=2.0)
        canceller.join(timeout=2.0)
        assert events == ["doc", "cleared"]

    def test_stale_timer_ignored(self, scheduler):
        written = []
        writer = DebouncedWriter(written.append, 2.0, scheduler)
        writer.submit("old")
        stale = scheduler.timers[0]
        writer.submit("new")

        stale.callback()
        assert written == []
        scheduler.run_all()
        assert written == ["new"]

    def test_failed_write_is_logged_not_raised(self, scheduler, caplog):
        def boom(_payload):
            raise OSError("disk full")

        writer = DebouncedWriter(boom, 2.0, scheduler)
        writer.submit("doc")
        scheduler.run_all()
        assert "Debounced write failed" in caplog.text
        assert not writer.pending

    def test_threading_scheduler_fires(self):
        fired = threading.Event()
        ThreadingScheduler().call_later(0.01, fired.set)
        assert fired.wait(timeout=2.0)
