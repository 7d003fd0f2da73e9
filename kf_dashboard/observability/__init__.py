"""Request-scoped logging helpers.

structlog contextvars carry the request id through every log line; the
upstream call is timed and logged separately.
"""
