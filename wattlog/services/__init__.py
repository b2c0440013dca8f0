"""
Domain services: arithmetic, identifiers, reducers and the usage engine.

CHANGELOG:
- 2026-10-12: Initial creation (STORY-003)

TODO:
- None
"""
