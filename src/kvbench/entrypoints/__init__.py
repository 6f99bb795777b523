"""Entrypoints (inbound adapters) for KVBENCH.

Expose the conformance suite and schema management on the command line.
"""
