"""Core Layer — pure domain logic: errors, types, filters, projections, pagination.

Invariants:
    - Core NEVER imports from infrastructure, services or api
    - All functions here are pure (no IO)

Design Decisions:
    - Functional core, imperative shell: services orchestrate IO around core
"""
