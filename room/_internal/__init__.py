"""Internal modules for room.

These are not part of the public API.

Modules:
    http - Shared HTTP client configuration
    redaction - Header redaction for debug output
"""
