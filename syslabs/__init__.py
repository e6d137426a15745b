"""Systems lab tools: cache simulation, cache-friendly matrix transposes, robust stream I/O and a CGI adder."""

__version__ = "0.1.0"