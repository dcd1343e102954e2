"""Domain models and the operation catalog.

Pure data structures (Pydantic v2 and dataclasses); no console or transport
concerns live here.
"""
