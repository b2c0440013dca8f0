"""
wattlog: daily electricity usage aggregation and analytics engine.

CHANGELOG:
- 2026-10-12: Initial creation (STORY-001)

TODO:
- None
"""
