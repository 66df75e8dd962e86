"""Unit tests for individual components in isolation.

Ensures fast execution with minimal dependencies.

Coverage:
    - models/: Conversation records and stream frames
    - storage/: Persistence and preference flags
    - client/: Relay client and SSE parsing
    - state/: Conversation controller flows
    - agent/: Upstream configuration and provider calls
    - ui/: Display helpers and input bar state

Uses fakes and mocks for the network and the upstream provider. Leverages
pytest-check for multiple assertions per test.
"""
