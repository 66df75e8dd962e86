"""Test package for Relay Chat.

Unit tests cover isolated logic and integration tests cover the relay and
client working together.

Structure:
    - unit/: Individual function and class tests
    - integration/: HTTP-level tests against the real FastAPI app

The upstream provider is faked at its service boundary; everything between
the browser-side controller and that boundary runs for real.
Leverages pytest with pytest-check for soft assertions.
"""
