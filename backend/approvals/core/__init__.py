"""Core Layer — pure domain logic, no IO, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Policy and pricing functions are pure and deterministic

Design Decisions:
    - Functional core separated from imperative shell: the workflow service
      fetches, asks core for a decision, then writes
"""
