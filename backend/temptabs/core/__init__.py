"""Core Layer: pure item lifecycle and list-state logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - All functions are pure and deterministic; time always arrives as an argument
    - Inputs are never mutated: every transform returns a new list or a replaced Item

Design Decisions:
    - Functional core separated from imperative shell (services/ runs the async
      read-compute-write around these functions)
"""
