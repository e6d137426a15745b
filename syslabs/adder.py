"""A minimal CGI program that adds the two numbers in its query string."""

from __future__ import annotations

import os
import re
import sys
from typing import Optional, Tuple

_INT = re.compile(r"\s*[+-]?\d+")


def _atoi(text: str) -> int:
    found = _INT.match(text)
    return int(found.group()) if found else 0


def parse_query(query: Optional[str]) -> Tuple[int, int]:
    """Return the two numbers of an ``a&b`` query; (0, 0) when there is no query."""
    if query is None:
        return 0, 0
    first, sep, second = query.partition("&")
    if not sep:
        raise ValueError("query string must hold two arguments separated by '&'")
    return _atoi(first), _atoi(second)


def adder_response(query: Optional[str]) -> str:
    """Return the CGI response headers and body for ``query``."""
    n1, n2 = parse_query(query)
    content = (
        "Welcome to add.com: "
        "THE Internet addition portal.\r\n<p>"
        f"The answer is: {n1} + {n2} = {n1 + n2}\r\n<p>"
        "Thanks for visiting!\r\n"
    )
    return (
        "Connection: close\r\n"
        f"Content-length: {len(content.encode())}\r\n"
        "Content-type: text/html\r\n\r\n"
        f"{content}"
    )


def main(argv=None) -> int:
    """Write the response for the QUERY_STRING environment variable to stdout."""
    try:
        response = adder_response(os.environ.get("QUERY_STRING"))
    except ValueError as exc:
        print(exc, file=sys.stderr)
        return 1
    sys.stdout.write(response)
    sys.stdout.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())