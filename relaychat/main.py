"""Relay Chat entry point (``relay-chat`` console script).

Integrated mode (default) serves the relay API and the chat page from one
uvicorn process, with the page mounted under /ui. Separate mode starts the
relay and a standalone NiceGUI server as two child processes.
"""

import logging
import os
import subprocess
import sys
import time

from dotenv import load_dotenv

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

UI_MOUNT_PATH = "/ui"
DEFAULT_PORT = 3000
DEFAULT_UI_PORT = 8080


def _host() -> str:
    return os.getenv("HOST", "0.0.0.0")


def _port() -> int:
    return int(os.getenv("PORT", str(DEFAULT_PORT)))


def _relay_url(port: int) -> str:
    return f"http://localhost:{port}"


def run_integrated() -> None:
    """Serve the relay and the chat page from a single process."""
    port = _port()
    # Must be set before the page module reads it at import
    os.environ.setdefault("API_BASE_URL", _relay_url(port))

    import uvicorn
    from nicegui import ui

    from relaychat.api.app import create_app
    from relaychat.ui.chat_page import chat_page  # noqa: F401 - Registers the page

    app = create_app()
    ui.run_with(
        app,
        mount_path=UI_MOUNT_PATH,
        title="AI Chat",
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "relay-chat-secret"),
    )

    logger.info(f"Relay listening on {_relay_url(port)} (docs at /docs)")
    logger.info(f"Chat UI at {_relay_url(port)}{UI_MOUNT_PATH}")

    uvicorn.run(
        app,
        host=_host(),
        port=port,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


def run_separate() -> None:
    """Run the relay and the chat page as two child processes.

    Stops both as soon as either exits.
    """
    port = _port()
    ui_port = os.getenv("UI_PORT", str(DEFAULT_UI_PORT))
    relay_cmd = [
        sys.executable,
        "-m",
        "uvicorn",
        "relaychat.api.app:app",
        "--host",
        _host(),
        "--port",
        str(port),
        "--reload",
    ]
    ui_cmd = [sys.executable, "-c", "from relaychat.ui.chat_page import main; main()"]

    logger.info(f"Starting relay on {_relay_url(port)}")
    logger.info(f"Starting chat UI on http://localhost:{ui_port}")

    processes = [
        subprocess.Popen(relay_cmd),
        subprocess.Popen(ui_cmd, env={"API_BASE_URL": _relay_url(port), **os.environ}),
    ]
    try:
        while all(proc.poll() is None for proc in processes):
            time.sleep(1)
    except KeyboardInterrupt:
        logger.info("Shutting down servers...")
    finally:
        for proc in processes:
            proc.terminate()
        for proc in processes:
            proc.wait()


def main() -> None:
    """Start Relay Chat in the mode named by RUN_MODE (integrated or separate)."""
    mode = os.getenv("RUN_MODE", "integrated").lower()
    logger.info(f"Starting Relay Chat in {mode} mode")

    if mode == "separate":
        run_separate()
    else:
        run_integrated()


if __name__ == "__main__":
    main()
