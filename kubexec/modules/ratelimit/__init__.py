"""
Rate Limit Module - Black Box Interface

Purpose: Bound how fast remote executions are dispatched
Interface: TokenBucket.start(), acquire(), stop()
Hidden: Refill thread, token accounting

Can be replaced with a distributed limiter without affecting callers.
"""

from .token_bucket import TokenBucket

__all__ = ["TokenBucket"]
