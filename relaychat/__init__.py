"""Relay Chat - browser chat client with a thin relay to an upstream LLM API.

Combines FastAPI for the relay server, agno and the OpenAI SDK for upstream
calls, httpx for the client, NiceGUI for the interface, and Pydantic for
data validation.

Components:
    - api: Relay HTTP endpoints and server-sent event streaming
    - agent: Upstream chat and transcription access
    - client: Relay client used by the interface
    - state: Conversation state controller
    - storage: Durable client-side key/value persistence
    - ui: Web interface for chat interactions
    - models: Conversation records and wire schemas
"""

__version__ = "0.1.0"
