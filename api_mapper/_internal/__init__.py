"""Internal modules for api-mapper.

These are not intended for direct use in application code.

Modules:
    http - HTTP client collaborator and its httpx-backed default
    routing - URL building and request assembly
    redaction - Masking of sensitive values in debug output
"""
