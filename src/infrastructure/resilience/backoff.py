"""Polling interval schedules."""
from typing import Iterator


class FibonacciBackoff:
    """
    Fibonacci-like polling intervals: each interval adds the previous
    increment, capped at ``max_interval``.

    With the defaults the schedule is 1, 1, 2, 3, 5, 8, 8, 8, ... seconds.
    """

    def __init__(self, initial_interval: float = 1.0, max_interval: float = 8.0):
        if initial_interval <= 0:
            raise ValueError("initial_interval must be positive")
        if max_interval < initial_interval:
            raise ValueError("max_interval cannot be smaller than initial_interval")
        self.initial_interval = initial_interval
        self.max_interval = max_interval

    def __iter__(self) -> Iterator[float]:
        interval = self.initial_interval
        increment = 0.0
        while True:
            yield interval
            previous_increment = increment
            increment = interval
            interval = min(interval + previous_increment, self.max_interval)
