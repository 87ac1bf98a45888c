"""
Utility functions for the simple mapper.
"""

import math
import time
from typing import Iterator


def get_divisors(n: int) -> list[int]:
    """
    Get all divisors of a number.

    Args:
        n: The number to factorize

    Returns:
        List of divisors in ascending order
    """
    if n <= 0:
        return [1]

    divisors = []
    large_divisors = []
    i = 1
    while i * i <= n:
        if n % i == 0:
            divisors.append(i)
            if i * i != n:
                large_divisors.append(n // i)
        i += 1
    divisors.extend(reversed(large_divisors))
    return divisors


def enumerate_factorizations(n: int, num_factors: int) -> Iterator[tuple[int, ...]]:
    """
    Enumerate ordered factorizations of n into exactly num_factors factors.

    Factors are >= 1 and their product is n. The order is lexicographic
    on the first factor, then the second, and so on.

    Args:
        n: Number to factorize
        num_factors: Number of (ordered) factors

    Yields:
        Tuples of length num_factors
    """
    if num_factors <= 0:
        if n == 1:
            yield ()
        return
    if num_factors == 1:
        yield (n,)
        return

    for d in get_divisors(n):
        for rest in enumerate_factorizations(n // d, num_factors - 1):
            yield (d,) + rest


def product(values) -> int:
    """Exact integer product (no fixed-width overflow)."""
    return math.prod(values)


class Timer:
    """Simple timer for profiling."""

    def __init__(self):
        self.times = {}
        self._starts = {}

    def start(self, name: str):
        """Start timing a section."""
        self._starts[name] = time.perf_counter()

    def stop(self, name: str) -> float:
        """Stop timing a section and return the elapsed seconds."""
        if name not in self._starts:
            return 0.0
        elapsed = time.perf_counter() - self._starts.pop(name)
        self.times[name] = self.times.get(name, 0.0) + elapsed
        return elapsed

    def report(self) -> str:
        """Generate timing report."""
        lines = ["Timing Report:"]
        for name, elapsed in sorted(self.times.items(), key=lambda x: -x[1]):
            lines.append(f"  {name}: {elapsed:.3f}s")
        return "\n".join(lines)
