"""Services Layer: async IO orchestration around the pure core.

Invariants:
    - Services own the database session for the duration of one request
"""
