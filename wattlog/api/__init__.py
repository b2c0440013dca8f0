"""
HTTP API package: routers and dependency providers.

CHANGELOG:
- 2026-10-16: Initial creation (STORY-012)

TODO:
- None
"""
