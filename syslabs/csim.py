"""A set-associative cache simulator with LRU replacement driven by memory traces."""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from syslabs.cachelab import print_summary

_HEX = re.compile(r"\s*(?:0[xX])?([0-9a-fA-F]+)")
_INT = re.compile(r"\s*[+-]?\d+")


class Operation(Enum):
    """The kind of memory access in a trace line."""

    LOAD = "L"
    STORE = "S"
    MODIFY = "M"


class AccessResult(Enum):
    """The outcome of a single cache access."""

    HIT = "hit"
    MISS = "miss"
    EVICT = "evict"


@dataclass
class SimStats:
    """Accumulated hit, miss and eviction counts."""

    hits: int = 0
    misses: int = 0
    evictions: int = 0

    def record(self, result: AccessResult) -> None:
        if result is AccessResult.HIT:
            self.hits += 1
        elif result is AccessResult.MISS:
            self.misses += 1
        else:
            self.misses += 1
            self.evictions += 1


@dataclass
class _Block:
    valid: bool = False
    tag: int = 0
    counter: int = 0


class Cache:
    """A cache of 2**set_bits sets, each holding ``associativity`` blocks."""

    def __init__(self, set_bits: int, block_bits: int, associativity: int):
        self.set_bits = set_bits
        self.block_bits = block_bits
        self.associativity = associativity
        self.nsets = 1 << set_bits
        self._sets: List[List[_Block]] = [
            [_Block(counter=j) for j in range(associativity)] for _ in range(self.nsets)
        ]

    def set_index(self, address: int) -> int:
        """Return the index of the set that ``address`` maps to."""
        return (address >> self.block_bits) % self.nsets

    def access(self, address: int) -> AccessResult:
        """Access ``address``, updating the cache, and report the outcome."""
        blocks = self._sets[self.set_index(address)]
        tag = address >> (self.set_bits + self.block_bits)

        match = next((blk for blk in blocks if blk.valid and blk.tag == tag), None)
        if match is not None:
            self._touch(blocks, match)
            return AccessResult.HIT

        empty = next((blk for blk in blocks if not blk.valid), None)
        if empty is not None:
            empty.valid = True
            empty.tag = tag
            self._touch(blocks, empty)
            return AccessResult.MISS

        victim = next((blk for blk in blocks if blk.counter == 0), None)
        if victim is None:
            raise RuntimeError("Cannot find victim")
        victim.tag = tag
        self._touch(blocks, victim)
        return AccessResult.EVICT

    def _touch(self, blocks: List[_Block], target: _Block) -> None:
        for blk in blocks:
            if blk is not target and blk.counter > target.counter:
                blk.counter -= 1
        target.counter = self.associativity - 1


def parse_line(line: str) -> Optional[Tuple[Operation, int]]:
    """Parse a trace line into (operation, address); None for lines to skip."""
    if not line.startswith(" ") or len(line) < 2:
        return None
    try:
        op = Operation(line[1])
    except ValueError:
        return None
    found = _HEX.match(line[3:])
    address = int(found.group(1), 16) if found else 0
    return op, address


def simulate(lines: Iterable[str], set_bits: int, block_bits: int, associativity: int) -> SimStats:
    """Run every access of a trace through a fresh cache and count the outcomes."""
    cache = Cache(set_bits, block_bits, associativity)
    stats = SimStats()
    for line in lines:
        parsed = parse_line(line)
        if parsed is None:
            continue
        op, address = parsed
        stats.record(cache.access(address))
        if op is Operation.MODIFY:
            stats.hits += 1
    return stats


def _atoi(text: str) -> int:
    found = _INT.match(text)
    return int(found.group()) if found else 0


def parse_args(argv: List[str]) -> Tuple[int, int, int, str]:
    """Parse ``-s -b -E -t`` options into (set_bits, block_bits, associativity, tracefile)."""
    argv = list(argv)
    if len(argv) < 8:
        raise ValueError("Too few arguments")
    set_bits = block_bits = associativity = 0
    tracefile: Optional[str] = None
    args = iter(argv)
    for flag in args:
        if len(flag) < 2 or flag[0] != "-" or flag[1] not in "sbEt":
            raise ValueError(f"Invalid argument: {flag}")
        value = next(args, None)
        if value is None:
            raise ValueError(f"Missing value for {flag}")
        key = flag[1]
        if key == "s":
            set_bits = _atoi(value)
        elif key == "b":
            block_bits = _atoi(value)
        elif key == "E":
            associativity = _atoi(value)
        else:
            tracefile = value
    if tracefile is None:
        raise ValueError("Missing trace file")
    return set_bits, block_bits, associativity, tracefile


def main(argv=None) -> int:
    """Simulate the trace named on the command line and print the summary."""
    if argv is None:
        argv = sys.argv[1:]
    try:
        set_bits, block_bits, associativity, tracefile = parse_args(argv)
    except ValueError as exc:
        print(exc)
        return 1
    try:
        with open(tracefile) as trace:
            stats = simulate(trace, set_bits, block_bits, associativity)
    except OSError:
        print("File open error")
        return 1
    except RuntimeError as exc:
        print(exc)
        return 1
    print_summary(stats.hits, stats.misses, stats.evictions)
    return 0


if __name__ == "__main__":
    sys.exit(main())