"""KVBENCH

A shared key-value store client contract for benchmarking harnesses.
Backend adapters implement one interface, and a single conformance suite
checks every adapter against the same CRUD and scan scenarios.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
