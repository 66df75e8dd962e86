"""Message input bar: draft text, send, and voice input."""

import base64
import binascii
import logging

from nicegui import events, ui

from relaychat.client.api_client import ApiError, RelayClient
from relaychat.state.controller import ChatController

logger = logging.getLogger(__name__)

AUDIO_EVENT = "relay_audio_recorded"

# MediaRecorder glue; hands the finished clip back to Python as base64.
RECORDER_JS = f"""
<script>
window.relayRecorder = {{
  recorder: null,
  chunks: [],
  async start() {{
    const stream = await navigator.mediaDevices.getUserMedia({{ audio: true }});
    const recorder = new MediaRecorder(stream, {{ mimeType: "audio/webm" }});
    this.chunks = [];
    recorder.ondataavailable = (e) => {{ if (e.data.size > 0) this.chunks.push(e.data); }};
    recorder.onstop = () => {{
      stream.getTracks().forEach((t) => t.stop());
      const blob = new Blob(this.chunks, {{ type: "audio/webm" }});
      if (blob.size === 0) return;
      const reader = new FileReader();
      reader.onloadend = () => emitEvent("{AUDIO_EVENT}", {{
        data: reader.result.split(",")[1],
        type: blob.type,
      }});
      reader.readAsDataURL(blob);
    }};
    recorder.start();
    this.recorder = recorder;
  }},
  stop() {{
    if (this.recorder && this.recorder.state !== "inactive") this.recorder.stop();
  }},
}};
</script>
"""


class InputBarState:
    """Draft text and recording flags behind the input bar.

    Sending is refused while a request is in flight. The bar's widgets are
    disabled from the same flag.
    """

    def __init__(self, controller: ChatController) -> None:
        self._controller = controller
        self.text = ""
        self.is_recording = False
        self.is_transcribing = False

    @property
    def disabled(self) -> bool:
        return self._controller.state.is_loading

    @property
    def can_submit(self) -> bool:
        return bool(self.text.strip()) and not self.disabled

    @property
    def can_record(self) -> bool:
        return not self.disabled and not self.is_transcribing

    async def submit(self) -> bool:
        """Send the draft.

        Returns:
            False if nothing was sent.
        """
        if not self.can_submit:
            return False
        text = self.text.strip()
        self.text = ""
        await self._controller.send_message(text)
        return True

    def append_transcript(self, transcript: str) -> None:
        transcript = transcript.strip()
        if not transcript:
            return
        self.text = f"{self.text} {transcript}" if self.text else transcript

    async def transcribe(self, client: RelayClient, audio: bytes, content_type: str) -> None:
        """Transcribe a recorded clip into the draft.

        Failures are logged only; the draft is left as it was.
        """
        self.is_transcribing = True
        try:
            transcript = await client.transcribe_audio(audio, content_type=content_type)
        except ApiError as e:
            logger.error(f"Transcription failed: {e.message}")
        else:
            self.append_transcript(transcript)
        finally:
            self.is_transcribing = False


def render_input_bar(controller: ChatController, client: RelayClient) -> InputBarState:
    """Render the input bar and wire it to the controller."""
    bar = InputBarState(controller)
    ui.add_body_html(RECORDER_JS)

    async def send() -> None:
        await bar.submit()

    async def toggle_recording() -> None:
        if bar.is_recording:
            ui.run_javascript("window.relayRecorder.stop()")
            bar.is_recording = False
        elif bar.can_record:
            ui.run_javascript("window.relayRecorder.start()")
            bar.is_recording = True

    async def on_audio(e: events.GenericEventArguments) -> None:
        payload = e.args if isinstance(e.args, dict) else {}
        try:
            audio = base64.b64decode(payload.get("data", ""), validate=True)
        except binascii.Error:
            logger.warning("Discarding undecodable audio clip")
            return
        if audio:
            await bar.transcribe(client, audio, payload.get("type") or "audio/webm")

    ui.on(AUDIO_EVENT, on_audio)

    with ui.row().classes("w-full p-4 gap-3 items-end border-t"):
        with ui.element("div").classes("flex-grow input-box px-3 py-2"):
            (
                ui.textarea(placeholder="Message...")
                .props("autogrow borderless dense rows=1")
                .classes("w-full")
                .bind_value(bar, "text")
                .bind_enabled_from(controller.state, "is_loading", backward=lambda v: not v)
                .on("keydown.enter.prevent", send)
            )
        (
            ui.button(icon="mic", on_click=toggle_recording)
            .props("round flat")
            .bind_enabled_from(bar, "can_record")
            .bind_visibility_from(bar, "is_recording", backward=lambda r: not r)
        )
        (
            ui.button(icon="stop", on_click=toggle_recording)
            .props("round unelevated color=negative")
            .bind_visibility_from(bar, "is_recording")
        )
        (
            ui.button(icon="send", on_click=send)
            .props("round unelevated")
            .classes("send-btn")
            .bind_enabled_from(bar, "can_submit")
        )
    return bar
