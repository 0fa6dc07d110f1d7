"""throwres — raise HTTP responses from anywhere in a FastAPI call stack.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Empty __init__.py: explicit imports only, no star exports
      (import signals from throwres.core.signals, wiring from throwres.api.error_handlers)
"""
