"""Request pacing between records."""

from __future__ import annotations

import time
from typing import Callable, Union

from survey_geocode.common.config_loader import Settings


class FixedDelayPacer:
    def __init__(self, delay_seconds: float, sleep: Callable[[float], None] = time.sleep) -> None:
        self.delay_seconds = delay_seconds
        self.sleep = sleep

    def pause(self) -> None:
        if self.delay_seconds > 0:
            self.sleep(self.delay_seconds)


class TokenBucket:
    def __init__(
        self,
        rate_per_sec: float,
        capacity: float | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.rate_per_sec = rate_per_sec
        self.capacity = capacity if capacity is not None else rate_per_sec
        self.tokens = self.capacity
        self.clock = clock
        self.sleep = sleep
        self.updated_at = clock()

    def acquire(self, tokens: float = 1.0) -> None:
        while True:
            now = self.clock()
            elapsed = now - self.updated_at
            self.tokens = min(self.capacity, self.tokens + elapsed * self.rate_per_sec)
            self.updated_at = now
            if self.tokens >= tokens:
                self.tokens -= tokens
                return
            deficit = tokens - self.tokens
            self.sleep(max(deficit / self.rate_per_sec, 0.01))


class TokenBucketPacer:
    def __init__(self, bucket: TokenBucket) -> None:
        self.bucket = bucket

    def pause(self) -> None:
        self.bucket.acquire()


Pacer = Union[FixedDelayPacer, TokenBucketPacer]


def build_pacer(settings: Settings) -> Pacer:
    if settings.pacing_strategy == "token_bucket":
        return TokenBucketPacer(TokenBucket(rate_per_sec=settings.rate_per_sec))
    return FixedDelayPacer(settings.delay_seconds)
