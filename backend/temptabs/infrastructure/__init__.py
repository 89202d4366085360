"""Infrastructure Layer: store adapters, clock, id generation, badge/render sinks, timers.

Invariants:
    - Infrastructure never imports core engines, only core types, errors and protocols
    - Every store failure is mapped to StoreError (core/errors.py)
"""
