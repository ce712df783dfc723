"""
Extract Layer - Pure I/O to External APIs

This layer handles all external data fetching with no business logic.
- No imports from transform or load layers
- Returns raw record dicts exactly as received
- Surfaces transport, status and payload-shape failures as RemoteError
"""
