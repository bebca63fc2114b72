"""Domain models and export schemas.

Plain typed structures only: no HTTP, CLI or file I/O here.
"""
