"""KVBENCH command-line interface."""
