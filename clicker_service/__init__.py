"""Ranked Clicker service - simulation engine behind a REST/WebSocket API.

This package wraps the ``clicker`` engine in a hexagonal layout.

Layers:
- application: Use cases and port interfaces
- infrastructure: Adapters for state storage and the release feed
- api: REST and WebSocket endpoints
"""

__version__ = "1.0.0"
