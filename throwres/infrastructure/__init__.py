"""Infrastructure Layer — host adapters and cross-cutting concerns.

Invariants:
    - Infrastructure never decides which response to send, it only writes one
    - Starlette-specific code lives here and in api/, nowhere else

Design Decisions:
    - One adapter per host primitive set (ADR: single responsibility)
"""
