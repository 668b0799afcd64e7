"""Infrastructure: database engine/session management and logging setup.

Invariants:
    - Nothing here knows about HTTP routes
"""
