"""
Load Layer - Data Persistence

This layer handles all data persistence operations.
- Local JSON store with atomic replace
- In-memory store for dry runs and tests
- No business logic, just I/O operations
"""
