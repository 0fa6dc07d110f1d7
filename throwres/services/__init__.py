"""Services Layer — orchestration between raised signals and the host pipeline.

Invariants:
    - Services depend on core/ protocols, never on a concrete sink
"""
