"""Core interfaces.

Protocols implemented by adapters, so the core never imports HTTP code.
"""
