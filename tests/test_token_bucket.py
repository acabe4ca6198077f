"""
Unit tests for the TokenBucket rate limiter.
"""

import threading
import time

import pytest

from kubexec.modules.ratelimit import TokenBucket


class TestTokenBucket:
    """Test token accounting and refill lifecycle."""

    def test_starts_full(self):
        bucket = TokenBucket(rate=10, burst=5)
        assert bucket.tokens == 5
        assert not bucket.running

    @pytest.mark.parametrize("rate,burst", [(0, 5), (-1, 5), (10, 0), (10, -3)])
    def test_rejects_invalid_parameters(self, rate, burst):
        with pytest.raises(ValueError):
            TokenBucket(rate=rate, burst=burst)

    def test_burst_then_wait_for_refill(self):
        """Five acquisitions are immediate, the sixth waits for a tick."""
        with TokenBucket(rate=10, burst=5) as bucket:
            start = time.monotonic()
            for _ in range(5):
                bucket.acquire()
            burst_elapsed = time.monotonic() - start
            assert burst_elapsed < 0.05

            bucket.acquire()
            assert time.monotonic() - start >= 0.08

    def test_refill_never_exceeds_capacity(self):
        with TokenBucket(rate=200, burst=3) as bucket:
            time.sleep(0.1)
            assert bucket.tokens == 3

    def test_refill_adds_tokens_after_consumption(self):
        with TokenBucket(rate=100, burst=2) as bucket:
            bucket.acquire()
            bucket.acquire()
            assert bucket.tokens == 0
            time.sleep(0.1)
            assert bucket.tokens == 2

    def test_no_refill_without_start(self):
        bucket = TokenBucket(rate=100, burst=1)
        bucket.acquire()
        time.sleep(0.05)
        assert bucket.tokens == 0

    def test_stop_halts_refill(self):
        bucket = TokenBucket(rate=100, burst=1).start()
        bucket.stop()
        assert not bucket.running
        bucket.acquire()
        time.sleep(0.05)
        assert bucket.tokens == 0

    def test_start_is_idempotent(self):
        bucket = TokenBucket(rate=10, burst=1)
        try:
            bucket.start()
            thread = bucket._refill_thread
            bucket.start()
            assert bucket._refill_thread is thread
        finally:
            bucket.stop()

    def test_refill_runs_on_named_daemon_thread(self):
        with TokenBucket(rate=10, burst=1) as bucket:
            thread = bucket._refill_thread
            assert isinstance(thread, threading.Thread)
            assert thread.daemon
            assert thread.name == "kubexec-token-refill"
            assert thread in threading.enumerate()

    def test_restart_after_stop(self):
        bucket = TokenBucket(rate=100, burst=1)
        bucket.start()
        bucket.stop()
        bucket.acquire()
        bucket.start()
        try:
            time.sleep(0.05)
            assert bucket.tokens == 1
        finally:
            bucket.stop()

    def test_concurrent_callers_stay_in_bounds(self):
        """100 threads acquire while a monitor samples the count."""
        observed = []
        stop_monitor = threading.Event()

        with TokenBucket(rate=1000, burst=5) as bucket:

            def monitor():
                while not stop_monitor.is_set():
                    observed.append(bucket.tokens)

            def worker():
                bucket.acquire()
                observed.append(bucket.tokens)

            monitor_thread = threading.Thread(target=monitor)
            monitor_thread.start()
            workers = [threading.Thread(target=worker) for _ in range(100)]
            for w in workers:
                w.start()
            for w in workers:
                w.join(timeout=10)
            stop_monitor.set()
            monitor_thread.join(timeout=5)

            assert all(not w.is_alive() for w in workers)

        assert observed
        assert min(observed) >= 0
        assert max(observed) <= 5
