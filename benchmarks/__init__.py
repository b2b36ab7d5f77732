"""
Benchmark suite for jread JSON reading performance.

Compares jread against established JSON libraries including:
- Python standard library json
- orjson (C-optimized)
- ujson (ultra-fast JSON)

Measures parsing speed and memory usage across different document shapes.
"""
