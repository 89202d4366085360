"""TempTabs application package: short-lived link stash with expiry, search and manual ordering.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
