"""DentaLect Subject Store: REST API over subjects and their files.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
