"""Service Layer: async orchestration around the pure core.

Invariants:
    - Services own all store IO; core functions never see the store
    - Routes call services, never the store or core mutators directly
"""
