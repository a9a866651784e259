"""Services Layer — use cases that wrap the pure core with IO.

Invariants:
    - Services load state, call the core once, persist, in that order
    - Services never re-implement a core precondition
"""
