"""Infrastructure Layer — database access, credential hashing, token signing, logging.

Invariants:
    - Implements the Protocols declared in core/repository_protocols.py
    - Library exceptions (SQLAlchemy, PyJWT) mapped to core/errors.py types

Design Decisions:
    - One module per external collaborator: swapping a library touches one file
"""
