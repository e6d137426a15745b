"""Check the correctness and cache performance of the registered transpose functions."""

from __future__ import annotations

import getopt
import random
import re
import signal
import sys
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional

from syslabs.cachelab import TransRegistry
from syslabs.csim import parse_line, simulate
from syslabs.trans import register_functions
from syslabs.tracegen import generate_trace

MAXN = 256
SUBMIT_DESCRIPTION = "Transpose submission"
INT_MAX = 2**31 - 1
TIMEOUT_SECONDS = 120
_ADDRESS_LIMIT = 0xFFFFFFFF

_INT = re.compile(r"\s*[+-]?\d+")


@dataclass
class Results:
    """Correctness and miss count of the submitted transpose function."""

    funcid: int = -1
    correct: bool = False
    misses: int = INT_MAX


class _Timeout(Exception):
    pass


@contextmanager
def _deadline(seconds: int) -> Iterator[None]:
    usable = hasattr(signal, "SIGALRM") and threading.current_thread() is threading.main_thread()
    if not usable:
        yield
        return

    def _expire(signum, frame):
        raise _Timeout()

    previous = signal.signal(signal.SIGALRM, _expire)
    signal.alarm(seconds)
    try:
        yield
    finally:
        signal.alarm(0)
        signal.signal(signal.SIGALRM, previous)


def _low_addresses(lines):
    for line in lines:
        parsed = parse_line(line)
        if parsed is not None and parsed[1] < _ADDRESS_LIMIT:
            yield line


def eval_perf(
    registry: TransRegistry,
    m: int,
    n: int,
    s: int,
    e: int,
    b: int,
    rng: Optional[random.Random] = None,
) -> Results:
    """Validate and simulate every registered function, updating its entry."""
    results = Results()
    total = len(registry)
    for index, entry in enumerate(registry):
        if entry.description == SUBMIT_DESCRIPTION:
            results.funcid = index

        print(f"\nFunction {index} ({total} total)\nStep 1: Validating and generating memory traces")
        try:
            trace, valid = generate_trace(entry.func, index, m, n, rng)
        except IndexError:
            valid = False
        if not valid:
            print(
                f"Validation error at function {index}! Run tracegen -M {m} -N {n} -F {index} "
                "for details.\nSkipping performance evaluation for this function."
            )
            continue

        entry.correct = True
        if results.funcid == index:
            results.correct = True

        print(f"Step 2: Evaluating performance (s={s}, E={e}, b={b})")
        stats = simulate(_low_addresses(trace.lines()), s, b, e)
        entry.num_hits = stats.hits
        entry.num_misses = stats.misses
        entry.num_evictions = stats.evictions
        print(
            f"func {index} ({entry.description}): hits:{stats.hits}, "
            f"misses:{stats.misses}, evictions:{stats.evictions}"
        )
        if results.funcid == index:
            results.misses = stats.misses
    return results


def usage(prog: str) -> str:
    """Return the usage text."""
    return "\n".join(
        [
            f"Usage: {prog} [-h] -M <rows> -N <cols>",
            "Options:",
            "  -h          Print this help message.",
            f"  -M <rows>   Number of matrix rows (max {MAXN})",
            f"  -N <cols>   Number of  matrix columns (max {MAXN})",
            f"Example: {prog} -M 8 -N 8",
        ]
    )


def _atoi(text: str) -> int:
    found = _INT.match(text)
    return int(found.group()) if found else 0


def main(argv=None) -> int:
    """Evaluate the registered transpose functions for the given matrix size."""
    prog = "test-trans"
    if argv is None:
        argv = sys.argv[1:]
    try:
        opts, _ = getopt.getopt(list(argv), "M:N:h")
    except getopt.GetoptError:
        print(usage(prog))
        return 1

    m = n = 0
    for opt, value in opts:
        if opt == "-M":
            m = _atoi(value)
        elif opt == "-N":
            n = _atoi(value)
        else:
            print(usage(prog))
            return 0

    if m == 0 or n == 0:
        print("Error: Missing required argument")
        print(usage(prog))
        return 1
    if m > MAXN or n > MAXN:
        print(f"Error: M or N exceeds {MAXN}")
        print(usage(prog))
        return 1

    registry = TransRegistry()
    register_functions(registry)
    try:
        with _deadline(TIMEOUT_SECONDS):
            results = eval_perf(registry, m, n, 5, 1, 5)
    except _Timeout:
        print("Error: Program timed out.")
        print("TEST_TRANS_RESULTS=0:0")
        return 1

    if results.funcid == -1:
        print("\nError: We could not find your transpose_submit() function")
        print(f'Error: Please ensure that description field is exactly "{SUBMIT_DESCRIPTION}"')
        print("\nTEST_TRANS_RESULTS=0:0")
    else:
        correct = int(results.correct)
        print(
            f"\nSummary for official submission (func {results.funcid}): "
            f"correctness={correct} misses={results.misses}"
        )
        print(f"\nTEST_TRANS_RESULTS={correct}:{results.misses}")
    return 0


if __name__ == "__main__":
    sys.exit(main())