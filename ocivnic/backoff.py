# This file is part of oci-vnic. See LICENSE file for license information.
"""Retry an operation with exponential backoff bounded by elapsed time.

Both the metadata service and the vnic attachment become ready some time
after the guest sees the device, so the matcher wraps its calls in
retry_with_data() using policies built by make_backoff_policy().
"""

import logging
import random
import time
from typing import Callable, Optional, Tuple, Type, TypeVar

LOG = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_INITIAL_INTERVAL = 1.0
DEFAULT_MULTIPLIER = 1.2
DEFAULT_RANDOMIZATION_FACTOR = 0.1
DEFAULT_MAX_INTERVAL = 60.0


class ExponentialBackoff:
    """Randomized, exponentially growing delays with a total time budget.

    Each call to next_backoff() returns a delay drawn uniformly from
    [interval * (1 - randomization_factor),
     interval * (1 + randomization_factor)]
    and then grows interval by multiplier, up to max_interval. Once the time
    elapsed since reset() plus that delay would exceed max_elapsed_time,
    next_backoff() returns None instead and the caller should give up.
    A max_elapsed_time of 0 or None never gives up.
    """

    def __init__(
        self,
        *,
        initial_interval: float = DEFAULT_INITIAL_INTERVAL,
        multiplier: float = DEFAULT_MULTIPLIER,
        randomization_factor: float = DEFAULT_RANDOMIZATION_FACTOR,
        max_interval: float = DEFAULT_MAX_INTERVAL,
        max_elapsed_time: Optional[float] = None,
    ):
        if initial_interval <= 0:
            raise ValueError("initial_interval must be positive")
        if multiplier < 1:
            raise ValueError("multiplier must be at least 1")
        if not 0 <= randomization_factor < 1:
            raise ValueError("randomization_factor must be in [0, 1)")
        self.initial_interval = initial_interval
        self.multiplier = multiplier
        self.randomization_factor = randomization_factor
        self.max_interval = max_interval
        self.max_elapsed_time = max_elapsed_time
        self.current_interval = initial_interval
        self.start_time = time.monotonic()

    def reset(self):
        self.current_interval = self.initial_interval
        self.start_time = time.monotonic()

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self.start_time

    def _randomized_interval(self) -> float:
        delta = self.randomization_factor * self.current_interval
        low = self.current_interval - delta
        high = self.current_interval + delta
        return low + random.random() * (high - low)

    def _increment_interval(self):
        if self.current_interval >= self.max_interval / self.multiplier:
            self.current_interval = self.max_interval
        else:
            self.current_interval *= self.multiplier

    def next_backoff(self) -> Optional[float]:
        """Return seconds to wait before the next attempt, None to stop."""
        elapsed = self.elapsed
        delay = self._randomized_interval()
        self._increment_interval()
        if self.max_elapsed_time and elapsed + delay > self.max_elapsed_time:
            return None
        return delay


def make_backoff_policy(max_elapsed_time: float) -> ExponentialBackoff:
    return ExponentialBackoff(
        initial_interval=DEFAULT_INITIAL_INTERVAL,
        multiplier=DEFAULT_MULTIPLIER,
        randomization_factor=DEFAULT_RANDOMIZATION_FACTOR,
        max_elapsed_time=max_elapsed_time,
    )


def retry_with_data(
    operation: Callable[[], T],
    policy: ExponentialBackoff,
    *,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,),
    status_cb: Callable = LOG.debug,
) -> T:
    """Call operation until it returns, sleeping per policy between tries.

    :param operation: callable taking no arguments.
    :param policy: the backoff policy, reset before the first attempt.
    :param retry_on: exception types that trigger another attempt. Any other
        exception propagates immediately.
    :param status_cb: called with a message describing each failed attempt.
    :return: the value returned by the first successful call.
    :raises: the last exception raised by operation once policy gives up.
    """
    policy.reset()
    attempt = 0
    while True:
        attempt += 1
        try:
            return operation()
        except retry_on as e:
            delay = policy.next_backoff()
            if delay is None:
                status_cb(
                    "Attempt %s failed after %.1fs, giving up: %s"
                    % (attempt, policy.elapsed, e)
                )
                raise
            status_cb(
                "Attempt %s failed [%.1f/%ss]: %s. Retrying in %.2fs"
                % (attempt, policy.elapsed, policy.max_elapsed_time, e, delay)
            )
        time.sleep(delay)
