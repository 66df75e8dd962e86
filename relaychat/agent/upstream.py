"""Upstream provider access for the relay.

Architecture Decisions:

1. **Stateless Agent** - The browser owns the conversation and sends the
   context window with every request, so the agno Agent runs without storage
   or history. Each request is independent; the agent handle is read-only
   after creation and shared across requests.

2. **Singleton Pattern** - Model client construction happens once per
   process. ``get_upstream_service`` builds it lazily and refuses to build
   it without credentials, so every route fails fast with a clear message.

3. **Errors Propagate** - Unlike a chat UI, the relay must tell the client
   what went wrong: failures surface as exceptions so the routes can answer
   with an error status or an in-stream error frame.

4. **Transcription via OpenAI SDK** - agno has no speech-to-text surface; the
   audio endpoint goes straight to the async OpenAI client.
"""

import logging
from collections.abc import AsyncGenerator

from agno.agent import Agent
from agno.models.message import Message
from agno.models.openai import OpenAIChat
from openai import AsyncOpenAI
from pydantic import ValidationError

from relaychat.agent.config import RelayConfig, get_relay_config
from relaychat.models.schemas import ChatMessage

logger = logging.getLogger(__name__)

# agno run event / status names
RUN_CONTENT_EVENT = "RunContent"
RUN_ERROR_EVENT = "RunError"
RUN_ERROR_STATUS = "ERROR"

NOT_INITIALIZED_MESSAGE = (
    "OpenAI client is not initialized. "
    "Please check your OPENAI_API_KEY environment variable."
)


class UpstreamError(Exception):
    """Raised when the upstream provider reports a failure."""

    pass


class UpstreamNotInitializedError(UpstreamError):
    """Raised when upstream credentials are missing."""

    pass


class UpstreamService:
    """Chat and transcription calls against the upstream provider.

    Wraps agno's Agent for chat completions (blocking and streaming) and
    the OpenAI SDK for transcription.
    """

    def __init__(self, config: RelayConfig | None = None) -> None:
        """Initialize the upstream service.

        Args:
            config: Optional relay configuration.
                    Loads from environment if not provided.
        """
        self._config = config or get_relay_config()
        self._agent = self._create_agent()
        self._audio_client = self._create_audio_client()

    def _create_agent(self) -> Agent:
        """Create the agno agent instance.

        Returns:
            Agent with an OpenAI chat model and no session storage.
        """
        model = OpenAIChat(
            id=self._config.model_name,
            api_key=self._config.api_key,
            base_url=self._config.base_url,
            temperature=self._config.temperature,
            max_tokens=self._config.max_tokens,
        )
        return Agent(model=model)

    def _create_audio_client(self) -> AsyncOpenAI:
        return AsyncOpenAI(
            api_key=self._config.api_key,
            base_url=self._config.base_url,
        )

    @staticmethod
    def _to_agno_messages(messages: list[ChatMessage]) -> list[Message]:
        return [Message(role=m.role, content=m.content) for m in messages]

    async def complete(self, messages: list[ChatMessage]) -> str:
        """Get the complete reply for a conversation.

        Args:
            messages: Full context, ending with the new user message.

        Returns:
            The upstream's reply text.

        Raises:
            UpstreamError: If the run ends in an error state.
        """
        response = await self._agent.arun(self._to_agno_messages(messages))
        if response.status == RUN_ERROR_STATUS:
            raise UpstreamError(str(response.content or "Upstream request failed"))
        return response.content or ""

    async def stream(self, messages: list[ChatMessage]) -> AsyncGenerator[str]:
        """Stream reply fragments for a conversation.

        Args:
            messages: Full context, ending with the new user message.

        Yields:
            Text fragments in arrival order.

        Raises:
            UpstreamError: If the upstream reports an error mid-run.
        """
        response_stream = self._agent.arun(self._to_agno_messages(messages), stream=True)

        async for event in response_stream:
            event_name = getattr(event, "event", None)
            if event_name == RUN_ERROR_EVENT:
                raise UpstreamError(str(event.content or "Upstream stream failed"))
            if event_name == RUN_CONTENT_EVENT and event.content:
                yield event.content

    async def transcribe(self, audio: bytes, filename: str, content_type: str) -> str:
        """Transcribe an audio clip.

        Args:
            audio: Raw audio bytes.
            filename: Name passed upstream (its extension hints the format).
            content_type: Declared MIME type of the audio.

        Returns:
            The transcript text.
        """
        transcription = await self._audio_client.audio.transcriptions.create(
            model=self._config.transcription_model,
            file=(filename, audio, content_type),
            response_format="text",
        )
        if isinstance(transcription, str):
            return transcription
        return transcription.text


# Module-level singleton instance
_upstream_service: UpstreamService | None = None


def get_upstream_service() -> UpstreamService:
    """Get or create the global upstream service.

    Returns:
        The UpstreamService instance.

    Raises:
        UpstreamNotInitializedError: If credentials are missing.
    """
    global _upstream_service
    if _upstream_service is None:
        try:
            config = get_relay_config()
        except ValidationError as e:
            logger.error(f"Failed to initialize upstream client: {e}")
            raise UpstreamNotInitializedError(NOT_INITIALIZED_MESSAGE) from e
        _upstream_service = UpstreamService(config)
    return _upstream_service
