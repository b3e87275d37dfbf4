"""Domain models and entities.

Why:
- Pure, strict data structures live here (Pydantic v2 and frozen dataclasses).
- The domain knows nothing about HTTP, the CLI or rendering: only the problem.
"""
