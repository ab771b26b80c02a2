"""Domain-specific realtime publishers.

These modules should contain *publish* helpers only (build payload + emit
through an injected gateway). They must not define Socket.IO server instances
or connection handlers.
"""
