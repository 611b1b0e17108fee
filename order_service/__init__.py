"""Order intake service: validation, orchestration, in-memory store, HTTP API."""
