"""Services — imperative shell around the pure core.

Invariants:
    - Services receive repositories by injection; they never build DB sessions
    - Domain failures raised as core/errors.py types, mapped to HTTP by api/
"""
