"""Upstream provider access for the relay server.

Responsibilities:
    - Provider configuration from the environment
    - Blocking and streaming chat completions through an agno Agent
    - Audio transcription through the OpenAI SDK
    - Failing fast when credentials are missing

Maintains clean separation from the HTTP layer.
"""

from relaychat.agent.config import RelayConfig, get_relay_config
from relaychat.agent.upstream import (
    UpstreamError,
    UpstreamNotInitializedError,
    UpstreamService,
    get_upstream_service,
)

__all__ = [
    "RelayConfig",
    "UpstreamError",
    "UpstreamNotInitializedError",
    "UpstreamService",
    "get_relay_config",
    "get_upstream_service",
]
