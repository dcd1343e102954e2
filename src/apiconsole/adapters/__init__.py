"""Adapters: HTTP transport, resource locators, built-in services and catalog loading.

Each module implements a contract of `apiconsole.core.interfaces` or feeds
the core with concrete data.
"""
