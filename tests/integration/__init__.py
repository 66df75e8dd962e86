"""Integration tests for components working together as a system.

Coverage:
    - Relay endpoints with real HTTP requests over ASGITransport
    - SSE framing checked line by line
    - RelayClient and ChatController against the in-process relay
    - Live LLM calls (when OPENAI_API_KEY is configured)

Only the upstream provider is replaced; set OPENAI_API_KEY to also run the
live round trip.
"""
