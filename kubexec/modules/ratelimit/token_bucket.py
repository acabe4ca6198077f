import logging
import threading
from typing import Optional

logger = logging.getLogger("kubexec.ratelimit")


class TokenBucket:
    """
    Token bucket limiting how fast executions are dispatched.

    The bucket starts full so bursts of up to ``burst`` acquisitions never
    wait. A refill thread adds one token every ``1 / rate`` seconds while
    the bucket is below capacity; ticks that land on a full bucket are
    dropped.

    Usage:
        with TokenBucket(rate=10, burst=5) as bucket:
            bucket.acquire()
            gateway.execute(...)
    """

    def __init__(self, rate: float, burst: int):
        """
        Initialize token bucket.

        Args:
            rate: Tokens added per second
            burst: Maximum number of tokens held
        """
        if rate <= 0:
            raise ValueError(f"rate must be positive, got {rate}")
        if burst <= 0:
            raise ValueError(f"burst must be positive, got {burst}")

        self.rate = rate
        self.burst = burst
        self._tokens = burst
        self._cond = threading.Condition()
        self._stop_event = threading.Event()
        self._refill_thread: Optional[threading.Thread] = None

    @property
    def interval(self) -> float:
        """Seconds between refill ticks."""
        return 1.0 / self.rate

    @property
    def tokens(self) -> int:
        """Tokens currently available."""
        with self._cond:
            return self._tokens

    @property
    def running(self) -> bool:
        """True while the refill thread is alive."""
        return self._refill_thread is not None and self._refill_thread.is_alive()

    def start(self) -> "TokenBucket":
        """Start the refill thread. Calling start on a running bucket is a no-op."""
        if self.running:
            return self

        self._stop_event.clear()
        self._refill_thread = threading.Thread(target=self._refill, name="kubexec-token-refill", daemon=True)
        self._refill_thread.start()
        logger.info(f"Token bucket started (rate={self.rate}/s, burst={self.burst})")
        return self

    def stop(self, timeout: Optional[float] = None) -> None:
        """Stop the refill thread and wait for it to exit."""
        self._stop_event.set()
        if self._refill_thread is not None:
            self._refill_thread.join(timeout)
            self._refill_thread = None
            logger.info("Token bucket stopped")

    def acquire(self) -> None:
        """Block until a token is available, then consume it."""
        with self._cond:
            while self._tokens == 0:
                self._cond.wait()
            self._tokens -= 1

    def _refill(self) -> None:
        """Refill loop; exits when the stop event is set."""
        while not self._stop_event.wait(self.interval):
            with self._cond:
                if self._tokens < self.burst:
                    self._tokens += 1
                    self._cond.notify()

    def __enter__(self) -> "TokenBucket":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
