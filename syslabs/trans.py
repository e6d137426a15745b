"""Matrix transpose routines B = A^T tuned for a 1KB direct-mapped cache."""

from __future__ import annotations

from typing import List

from syslabs.cachelab import TransRegistry

Matrix = List[List[int]]

TRANSPOSE_SUBMIT_DESC = "Transpose submission"
TRANS_DESC = "Simple row-wise scan transpose"


def transpose_submit(m: int, n: int, a: Matrix, b: Matrix) -> None:
    """Transpose using the routine dedicated to the matrix size."""
    if m == 32 and n == 32:
        transpose_32(a, b)
    if m == 64 and n == 64:
        transpose_64(a, b)
    if m == 61 and n == 67:
        transpose_6167(a, b)
    else:
        print("Unexpected size")


def transpose_32(a: Matrix, b: Matrix) -> None:
    """Transpose a 32x32 matrix in 8x8 blocks split into 4x4 quadrants."""
    for bx in range(0, 32, 8):
        for by in range(0, 32, 8):
            for x in range(7, 3, -1):
                for y in range(3, -1, -1):
                    b[by + y][bx + x] = a[bx + x][by + y]
            for x in range(7, 3, -1):
                for y in range(4, 8):
                    b[by + y - 4][bx + x - 4] = a[bx + x][by + y]
            for x in range(4):
                for y in range(4, 8):
                    b[by + y][bx + x] = a[bx + x][by + y]
            for x in range(4):
                for y in range(4):
                    b[by + y + 4][bx + x + 4] = a[bx + x][by + y]
            for x in range(4):
                for y in range(4):
                    b[by + x][bx + y], b[by + x + 4][bx + y + 4] = (
                        b[by + x + 4][bx + y + 4],
                        b[by + x][bx + y],
                    )


def transpose_64(a: Matrix, b: Matrix) -> None:
    """Transpose a 64x64 matrix in 8x8 blocks with in-place fixups."""
    for bx in range(0, 64, 8):
        for by in range(0, 64, 8):
            for offset in (0, 4):
                for x in range(offset, offset + 2):
                    for y in range(8):
                        b[by + x + 2][bx + y] = a[bx + x][by + y]
                for x in range(offset + 2, offset + 4):
                    for y in range(8):
                        b[by + x - 2][bx + y] = a[bx + x][by + y]
                for x in range(offset, offset + 2):
                    for y in range(8):
                        swap(b, by + x, bx + y, by + x + 2, bx + y)
                for x in range(offset, offset + 4):
                    for y in range(4):
                        if x - offset > y:
                            swap(b, by + x, bx + y, by + y + offset, bx + x - offset)
                for x in range(offset, offset + 4):
                    for y in range(4, 8):
                        if x - offset > y - 4:
                            swap(b, by + x, bx + y, by + y - 4 + offset, bx + x + 4 - offset)
                for x in range(offset, offset + 2):
                    for y in range(4 - offset, 8 - offset):
                        swap(b, by + x, bx + y, by + x + 2, bx + y)
            for x in range(4, 6):
                for y in range(4):
                    swap(b, by + x, bx + y, by + x - 2, bx + y + 4)
            for x in range(6, 8):
                for y in range(4):
                    swap(b, by + x, bx + y, by + x - 6, bx + y + 4)


def transpose_6167(a: Matrix, b: Matrix) -> None:
    """Transpose a 67-row, 61-column matrix in 16x16 blocks."""
    bsize = 16
    rows_b = 61
    temp = 0
    for bx in range(0, 61, bsize):
        for by in range(0, 67, bsize):
            for y in range(min(bsize, 67 - by)):
                for x in range(min(bsize, 61 - bx)):
                    if bx + x == by + y:
                        temp = a[by + y][by + y]
                    else:
                        b[bx + x][by + y] = a[by + y][bx + x]
                if bx == by and by + y < rows_b:
                    b[by + y][by + y] = temp


def swap(b: Matrix, x1: int, y1: int, x2: int, y2: int) -> None:
    """Exchange two entries of ``b``."""
    b[x1][y1], b[x2][y2] = b[x2][y2], b[x1][y1]


def trans(m: int, n: int, a: Matrix, b: Matrix) -> None:
    """Plain row-wise transpose, not tuned for the cache."""
    for i, row in enumerate(a[:n]):
        for j, value in enumerate(row[:m]):
            b[j][i] = value


def is_transpose(m: int, n: int, a: Matrix, b: Matrix) -> bool:
    """Return whether ``b`` is the transpose of ``a``."""
    return all(a[i][j] == b[j][i] for i in range(n) for j in range(m))


def register_functions(registry: TransRegistry) -> None:
    """Register the transpose functions to be evaluated."""
    registry.register(transpose_submit, TRANSPOSE_SUBMIT_DESC)
    registry.register(trans, TRANS_DESC)