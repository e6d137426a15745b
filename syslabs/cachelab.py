"""Shared helpers for the cache simulator and the transpose evaluation."""

from __future__ import annotations

import random
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Tuple

MAX_TRANS_FUNCS = 100
RAND_MAX = 2**31 - 1
RESULTS_FILE = ".csim_results"

Matrix = List[List[int]]
TransposeFn = Callable[[int, int, Matrix, Matrix], None]


@dataclass
class TransFunc:
    """A registered transpose function and its evaluation results."""

    func: TransposeFn
    description: str
    correct: bool = False
    num_hits: int = 0
    num_misses: int = 0
    num_evictions: int = 0


class TransRegistry:
    """An ordered collection of transpose functions to be evaluated."""

    def __init__(self):
        self._funcs: List[TransFunc] = []

    def register(self, func: TransposeFn, description: str) -> TransFunc:
        """Add a transpose function; at most MAX_TRANS_FUNCS may be held."""
        if len(self._funcs) >= MAX_TRANS_FUNCS:
            raise OverflowError(
                f"cannot register more than {MAX_TRANS_FUNCS} transpose functions"
            )
        entry = TransFunc(func, description)
        self._funcs.append(entry)
        return entry

    def __iter__(self) -> Iterator[TransFunc]:
        return iter(self._funcs)

    def __len__(self) -> int:
        return len(self._funcs)

    def __getitem__(self, index: int) -> TransFunc:
        return self._funcs[index]


def print_summary(hits: int, misses: int, evictions: int, path=RESULTS_FILE) -> None:
    """Print the simulation statistics and record them in the results file."""
    print(f"hits:{hits} misses:{misses} evictions:{evictions}")
    Path(path).write_text(f"{hits} {misses} {evictions}\n")


def _random_source(rng: Optional[random.Random]) -> random.Random:
    return rng if rng is not None else random.Random(int(time.time()))


def init_matrix(m: int, n: int, rng: Optional[random.Random] = None) -> Tuple[Matrix, Matrix]:
    """Return a random N x M matrix A and a random M x N matrix B."""
    rng = _random_source(rng)
    a = [[0] * m for _ in range(n)]
    b = [[0] * n for _ in range(m)]
    for i in range(n):
        for j in range(m):
            a[i][j] = rng.randint(0, RAND_MAX)
            b[j][i] = rng.randint(0, RAND_MAX)
    return a, b


def rand_matrix(m: int, n: int, rng: Optional[random.Random] = None) -> Matrix:
    """Return a random N x M matrix."""
    rng = _random_source(rng)
    return [[rng.randint(0, RAND_MAX) for _ in range(m)] for _ in range(n)]


def correct_trans(m: int, n: int, a: Matrix) -> Matrix:
    """Return the M x N transpose of the N x M matrix ``a``."""
    return [[a[i][j] for i in range(n)] for j in range(m)]