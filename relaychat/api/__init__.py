"""FastAPI endpoints for the chat relay.

HTTP and streaming routes with async request handling.
Supports Server-Sent Events for real-time chat streaming.

Endpoints:
    - GET /: Liveness probe
    - GET /health: Service health status
    - POST /api/chat: Complete chat reply
    - POST /api/chat/stream: Streamed chat reply
    - POST /api/transcribe: Speech-to-text for recorded audio
"""

from relaychat.api.app import app, create_app

__all__ = ["app", "create_app"]
