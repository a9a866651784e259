"""Core Layer — pure domain logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Time, caller identity, value transfer and event emission arrive as arguments
      or injected Protocols (capability_protocols.py)

Design Decisions:
    - Functional core separated from imperative shell (impureim sandwich)
"""
