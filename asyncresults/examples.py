"""Small tasks that show results and executors at work."""

from __future__ import annotations

import math
from concurrent.futures import ThreadPoolExecutor
from typing import Iterator


def read_lines(text: str) -> Iterator[str]:
    """Yield the lines of *text*, split at each newline; the last part is always yielded."""
    start = 0
    while (end := text.find("\n", start)) != -1:
        yield text[start:end]
        start = end + 1
    yield text[start:]


def is_prime(num: int) -> bool:
    """Report whether *num* is a prime number."""
    if num <= 1:
        return False
    if num <= 3:
        return True
    if num % 2 == 0 or num % 3 == 0:
        return False
    limit = math.isqrt(num)
    return all(num % i != 0 and num % (i + 2) != 0 for i in range(5, limit + 1, 6))


def find_primes(begin: int, end: int) -> list[int]:
    """Return the primes in ``[begin, end)`` in ascending order."""
    if begin > end:
        raise ValueError("find_primes() - begin must not be greater than end")
    return [n for n in range(begin, end) if is_prime(n)]


def _count_even_chunk(chunk: list[int]) -> int:
    return sum(1 for n in chunk if n % 2 == 0)


def count_even(numbers: list[int], concurrency_level: int) -> int:
    """Count even numbers in *numbers* using *concurrency_level* workers.

    The list is cut into ``concurrency_level`` chunks of equal size; elements
    left over after the last full chunk are not counted.
    """
    if concurrency_level < 1:
        raise ValueError("count_even() - concurrency_level must be at least 1")
    chunk_size = len(numbers) // concurrency_level
    chunks = [numbers[i * chunk_size:(i + 1) * chunk_size] for i in range(concurrency_level)]
    with ThreadPoolExecutor(max_workers=concurrency_level) as pool:
        return sum(pool.map(_count_even_chunk, chunks))


def _as_byte(char: str | bytes, name: str) -> bytes:
    raw = char.encode("latin-1") if isinstance(char, str) else bytes(char)
    if len(raw) != 1:
        raise ValueError(f"replace_chars() - {name} must be one character only")
    return raw


def replace_chars(data: bytes, old: str | bytes, new: str | bytes) -> bytes:
    """Return *data* with every occurrence of the byte *old* replaced by *new*."""
    return bytes(data).replace(_as_byte(old, "old"), _as_byte(new, "new"))