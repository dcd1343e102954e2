"""Interfaces (Protocols) of the core.

The core depends on these abstractions; adapters and the CLI implement them.
"""
