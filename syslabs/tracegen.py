"""Run transpose functions on traced matrices and record their memory accesses."""

from __future__ import annotations

import getopt
import random
import re
import sys
import time
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Sequence, Tuple, Union

from syslabs.cachelab import Matrix, TransRegistry, correct_trans, init_matrix
from syslabs.csim import Operation
from syslabs.trans import register_functions

ELEMENT_SIZE = 4
MAXN = 256
A_BASE = 0x0030B080
B_BASE = A_BASE + MAXN * MAXN * ELEMENT_SIZE

_INT = re.compile(r"\s*[+-]?\d+")


@dataclass(frozen=True)
class _Access:
    op: Operation
    address: int
    size: int


class MemoryTrace:
    """An ordered log of data loads and stores."""

    def __init__(self):
        self._accesses: List[_Access] = []

    def record(self, op: Union[Operation, str], address: int, size: int = ELEMENT_SIZE) -> None:
        """Append one access; ``op`` is an Operation or its letter."""
        self._accesses.append(_Access(Operation(op), address, size))

    def lines(self) -> List[str]:
        """Return the accesses as trace lines such as `` L 0030b080,4``."""
        return [f" {acc.op.value} {acc.address:08x},{acc.size}" for acc in self._accesses]

    def __len__(self) -> int:
        return len(self._accesses)


class _TracedRow:
    """One row of a traced matrix; element reads and writes are logged."""

    def __init__(self, matrix: "TracedMatrix", row: int):
        self._matrix = matrix
        self._row = row

    def __len__(self) -> int:
        return self._matrix.cols

    def _check(self, col: int) -> None:
        if not 0 <= col < self._matrix.cols:
            raise IndexError(f"column {col} out of range")

    def _load(self, col: int) -> int:
        self._check(col)
        self._matrix.trace.record(Operation.LOAD, self._matrix._address(self._row, col))
        return self._matrix._data[self._row][col]

    def _loads(self, cols: range) -> Iterator[int]:
        for col in cols:
            yield self._load(col)

    def __getitem__(self, col):
        if isinstance(col, slice):
            return self._loads(range(*col.indices(self._matrix.cols)))
        return self._load(col)

    def __setitem__(self, col: int, value: int) -> None:
        self._check(col)
        self._matrix.trace.record(Operation.STORE, self._matrix._address(self._row, col))
        self._matrix._data[self._row][col] = value

    def __iter__(self) -> Iterator[int]:
        return self._loads(range(self._matrix.cols))


class TracedMatrix:
    """A row-major integer matrix at ``base`` whose element accesses are traced."""

    def __init__(
        self,
        rows: int,
        cols: int,
        base: int,
        trace: MemoryTrace,
        values: Optional[Sequence[Sequence[int]]] = None,
    ):
        self.rows = rows
        self.cols = cols
        self.base = base
        self.trace = trace
        if values is None:
            self._data = [[0] * cols for _ in range(rows)]
        else:
            self._data = [list(row) for row in values]
            if len(self._data) != rows or any(len(row) != cols for row in self._data):
                raise ValueError(f"values do not form a {rows}x{cols} matrix")

    def _address(self, row: int, col: int) -> int:
        return self.base + (row * self.cols + col) * ELEMENT_SIZE

    def __len__(self) -> int:
        return self.rows

    def __getitem__(self, row):
        if isinstance(row, slice):
            return [_TracedRow(self, r) for r in range(*row.indices(self.rows))]
        if not 0 <= row < self.rows:
            raise IndexError(f"row {row} out of range")
        return _TracedRow(self, row)

    def __iter__(self) -> Iterator[_TracedRow]:
        return (_TracedRow(self, r) for r in range(self.rows))

    def values(self) -> Matrix:
        """Return a plain copy of the contents, without tracing."""
        return [list(row) for row in self._data]


def validate(fn: int, m: int, n: int, a: Matrix, b: Matrix) -> bool:
    """Check that ``b`` (M x N) is the transpose of ``a`` (N x M)."""
    expected = correct_trans(m, n, a)
    for i, (want_row, got_row) in enumerate(zip(expected, b)):
        for j, (want, got) in enumerate(zip(want_row, got_row)):
            if want != got:
                print(
                    f"Validation failed on function {fn}! "
                    f"Expected {want} but got {got} at B[{i}][{j}]"
                )
                return False
    return True


def generate_trace(
    func: Callable[[int, int, object, object], None],
    fn: int,
    m: int,
    n: int,
    rng: Optional[random.Random] = None,
) -> Tuple[MemoryTrace, bool]:
    """Run ``func`` on random traced matrices; return its trace and whether it was correct."""
    if not (0 <= m <= MAXN and 0 <= n <= MAXN):
        raise ValueError(f"M and N must be between 0 and {MAXN}")
    a_values, b_values = init_matrix(m, n, rng)
    trace = MemoryTrace()
    a = TracedMatrix(n, m, A_BASE, trace, a_values)
    b = TracedMatrix(m, n, B_BASE, trace, b_values)
    func(m, n, a, b)
    return trace, validate(fn, m, n, a.values(), b.values())


def _atoi(text: str) -> int:
    found = _INT.match(text)
    return int(found.group()) if found else 0


def main(argv=None) -> int:
    """Print the traces of the registered transpose functions; exit non-zero on failure."""
    if argv is None:
        argv = sys.argv[1:]
    try:
        opts, _ = getopt.getopt(list(argv), "M:N:F:")
    except getopt.GetoptError:
        print("./tracegen failed to parse its options.")
        return 1

    m = n = 0
    selected = -1
    for opt, value in opts:
        if opt == "-M":
            m = _atoi(value)
        elif opt == "-N":
            n = _atoi(value)
        else:
            selected = _atoi(value)

    registry = TransRegistry()
    register_functions(registry)
    rng = random.Random(int(time.time()))

    if selected == -1:
        targets = list(enumerate(registry))
    elif 0 <= selected < len(registry):
        targets = [(selected, registry[selected])]
    else:
        print(f"No transpose function with index {selected}")
        return 1

    for index, entry in targets:
        try:
            trace, valid = generate_trace(entry.func, index, m, n, rng)
        except ValueError as exc:
            print(exc)
            return 1
        except IndexError:
            print(f"Function {index} accessed memory out of bounds")
            return index + 1
        for line in trace.lines():
            print(line)
        if not valid:
            return index + 1
    return 0


if __name__ == "__main__":
    sys.exit(main())