"""
Application Layer for the FitTrack cascade API.

This package contains:
- ports/: Abstract store interface (what the engine needs)
- batching, traversal, locks: shared machinery of the cascade engine
- use_cases/: Duplicate, delete, count and reorder operations
"""
