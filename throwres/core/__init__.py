"""Core Layer — signal values and their contracts, no IO, no async.

Invariants:
    - No module in core/ imports from services/, api/ or infrastructure/
    - Terminal actions built here only talk to a ResponseSink; they never
      touch Starlette objects directly

Design Decisions:
    - Functional core separated from imperative shell: signals describe a
      response, the shell (services/ + infrastructure/) writes it
"""
