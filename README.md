# syslabs

Small systems programming tools in pure Python:

- a set-associative cache simulator with LRU replacement (`syslabs.csim`),
- matrix transpose routines tuned for a small direct-mapped cache
  (`syslabs.trans`), a trace generator that records their memory accesses
  (`syslabs.tracegen`) and an evaluator that scores them
  (`syslabs.evaluator`), with shared helpers in `syslabs.cachelab`,
- robust byte-stream I/O with a buffered line reader (`syslabs.rio`),
- a minimal CGI program that adds two numbers (`syslabs.adder`).

The package has no runtime dependencies beyond the standard library.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Cache simulator

`syslabs-csim` replays a memory trace through a cache with `2**s` sets,
`E` lines per set and `2**b`-byte blocks:

```
syslabs-csim -s 4 -E 1 -b 4 -t traces/yi.trace
```

Each trace line that starts with a space is an access: ` L addr,size` for a
load, ` S addr,size` for a store, and ` M addr,size` for a modify, which counts
as the access followed by one extra hit. Other lines, such as instruction
fetches starting with `I`, are skipped. The program prints a line of the form

```
hits:<hits> misses:<misses> evictions:<evictions>
```

and writes the three numbers to `.csim_results` in the current directory.
Fewer than four options, an unknown option or an unreadable trace file make it
print an error and exit with status 1.

The simulator is also usable as a library:

```python
from syslabs.csim import Cache, simulate

cache = Cache(4, 4, 1)
result = cache.access(0x10)       # AccessResult.HIT, MISS or EVICT

with open("traces/yi.trace") as trace:
    stats = simulate(trace, 4, 4, 1)
print(stats.hits, stats.misses, stats.evictions)
```

`parse_line` turns one trace line into an `(Operation, address)` pair, or
`None` for lines to skip.

## Matrix transposes

`syslabs.trans` holds `transpose_submit`, which uses `transpose_32`,
`transpose_64` or `transpose_6167` for 32×32, 64×64 and 61×67 matrices (and
prints `Unexpected size` unless the matrix is 61×67), and the plain row-wise
`trans`. `is_transpose` checks a result. `register_functions` adds
`transpose_submit` and `trans` to a `TransRegistry` from `syslabs.cachelab`.

`syslabs.cachelab` also provides `init_matrix`, `rand_matrix`,
`correct_trans` and `print_summary`.

`syslabs-tracegen` runs the registered functions on random matrices of the
given size, checks each result against the reference transpose and prints the
recorded loads and stores as trace lines such as ` L 0030b080,4`:

```
syslabs-tracegen -M 32 -N 32 -F 0
```

Without `-F` every registered function is run. If function `i` produces a
wrong result the command exits with status `i + 1`.

From Python, `generate_trace(func, fn, m, n)` returns a `MemoryTrace` and
whether the result was correct; matrices are wrapped in `TracedMatrix` so that
every element read and write is logged.

`syslabs-test-trans` evaluates every registered function: it validates it,
replays its memory trace through a 1 KB direct-mapped cache with 32-byte blocks
(`s=5, E=1, b=5`) and reports hits, misses and evictions. It ends with a
summary line for the function described as `Transpose submission`:

```
syslabs-test-trans -M 32 -N 32
...
TEST_TRANS_RESULTS=<correctness>:<misses>
```

`M` and `N` must both be given and may not exceed 256; `-h` prints usage. The
run gives up after 120 seconds where the platform supports alarms.

## Robust I/O

`syslabs.rio` works on sockets and binary streams:

- `read_n(stream, n)` reads up to `n` bytes, stopping early only at end of
  stream,
- `write_n(stream, data)` writes all of `data`, retrying short writes,
- `RioReader(stream)` buffers input and offers `read(n)`, `readn(n)` and
  `readline(maxlen)`, which returns a line with its newline and at most
  `maxlen - 1` bytes, or `b""` at end of stream.

## Adder CGI program

`syslabs-adder` reads two numbers from `QUERY_STRING` (as in `15000&213`) and
writes an HTML page with their sum, headers included, to standard output. With
no `QUERY_STRING` both numbers are 0; a query without `&` is an error (exit
status 1). `adder_response(query)` returns the same text as a string.

## What the package does not do

It contains no web server and no HTTP proxy: there is nothing here that
listens on a port, serves files or runs CGI programs. The adder program and
the `syslabs.rio` helpers can be used by such a server, but one has to be
provided separately.